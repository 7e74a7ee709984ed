"""
Service Layer

- analysis_client: request composition, remote call, response validation
- inspection_workflow: state machine for one inspection at a time
"""
