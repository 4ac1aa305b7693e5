import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_email_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "principal": "admin@cafe.com"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "admin@cafe.com" not in result["principal"]
        assert "***MASKED***" in result["principal"]

    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_authorization_header_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "authorization: eyJhbGciOi"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "eyJhbGciOi" not in result["header"]

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "order.placed", "quantity": 3, "status": "PENDING"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result == {"event": "order.placed", "quantity": 3, "status": "PENDING"}
