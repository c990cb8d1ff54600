"""Import definitions for plans and plan writers."""

from .plan import Plan as Plan
from .plan import PlanExecutionError as PlanExecutionError
from .plan import PlanStep as PlanStep
from .plan_writers import plan_to_json as plan_to_json
from .plan_writers import plan_to_records as plan_to_records
from .plan_writers import plan_to_text as plan_to_text
from .plan_writers import write_plan_json as write_plan_json
from .plan_writers import write_plan_text as write_plan_text
from .plan_writers import write_plan_yaml as write_plan_yaml
