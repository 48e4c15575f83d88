'''
Configuration harness for workflow, protocol and repository linting.

Each validator fetches documents from GitHub through a DocumentStore,
runs a fixed checklist and records PASS/FAIL/WARN/SKIP results. The suite
runner aggregates the per-validator summaries into a readiness tier.

Usage:
  python -m harness.runner              # all suites
  python -m harness.runner --workflow   # workflow JSON only
  python -m harness.runner --repo --code
'''
