"""
Barber bot test suite.

Running Tests:
    # Run all tests
    pytest tests -v

    # Run one module
    pytest tests/unit/test_conversation_router.py -v

Test Coverage:
    - Date/time reply parsing
    - Session store
    - Conversation routing and booking flow (in-memory transport and calendar)
    - Google Calendar gateway (mocked API service)
    - WhatsApp Cloud API transport (mocked HTTP client)
    - Webhook and health endpoints
"""
