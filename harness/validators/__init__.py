"""
Validators, one per document family.

Each validator takes a DocumentStore, records its checklist to a fresh
Reporter and returns the resulting SuiteSummary.
"""

from harness.validators.code_nodes import validate_code
from harness.validators.protocol import validate_protocols
from harness.validators.repo import validate_repos
from harness.validators.workflow import validate_workflow
