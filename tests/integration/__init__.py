"""
Integration tests for the Email Intelligence Service.

Test components together with only the network mocked:
- Vendor adapters on httpx.MockTransport (Anthropic, OpenAI)
- Full flow (gateway fetch → prompt → vendor → validation → cache → usage)
- API endpoints (FastAPI TestClient)
"""
