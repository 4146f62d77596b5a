"""
Unit tests for the Email Intelligence Service.

Test individual components in isolation:
- Tier resolution, vendor adapters and the adapter registry
- Prompt builder (templates, truncation, thread previews)
- Validation stages (each stage with positive/negative cases)
- Result cache, usage tracker
- Analysis service and batch orchestrator
- HTTP routes and error mapping
"""
