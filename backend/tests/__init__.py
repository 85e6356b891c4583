"""
TextureGen Backend Test Suite

Test structure:
- unit/: Test components in isolation with mocks
- integration/: Full runs through the API with a fake Gemini SDK client
- e2e/: Real image model tests (marked @pytest.mark.slow)
- mocks/: Mock implementations for testing
"""
