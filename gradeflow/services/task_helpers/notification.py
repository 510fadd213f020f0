# /gradeflow/services/task_helpers/notification.py

import html
from typing import Optional, Sequence

from ... import config
from ...models import effect_model, test_model

ASSIGN_CORRECTOR_SUBJECT = "You have been assigned as a Test Corrector!"

def build_assign_corrector_email(
    recipient: str,
    test: test_model.TestDefinition,
    subject_name: Optional[str],
    student_names: Sequence[str],
) -> effect_model.NotificationEffect:
    """Builds (never sends) the email telling a corrector which test and students they got."""
    students_html = "".join(f"<li>{html.escape(name)}</li>" for name in student_names)
    body = (
        f"<h2>{ASSIGN_CORRECTOR_SUBJECT}</h2>"
        f"<p><strong>Test Name:</strong> {html.escape(test.name)}</p>"
        f"<p><strong>Subject:</strong> {html.escape(subject_name or '-')}</p>"
        f"<p><strong>Description:</strong> {html.escape(test.description or '')}</p>"
        f"<p><strong>Students to Correct:</strong></p>"
        f"<ol>{students_html}</ol>"
    )
    return effect_model.NotificationEffect(
        recipient=recipient,
        sender=config.NOTIFICATION_SENDER_EMAIL,
        subject=ASSIGN_CORRECTOR_SUBJECT,
        html=body,
    )
