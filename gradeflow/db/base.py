# /gradeflow/db/base.py

# Central registry for all SQLAlchemy models. Importing them here ensures the
# Base metadata knows every table before `create_all` runs.

from .base_class import Base

from .models.test_models import Test
from .models.task_models import Task
from .models.result_models import StudentTestResult
