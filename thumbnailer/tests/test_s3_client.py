"""Tests for S3Client class."""

import pytest
from unittest.mock import MagicMock, patch

from thumbnailer.s3_client import S3Client
from thumbnailer.s3_config import S3Config


class TestS3Client:
    """Tests for S3Client class."""

    @pytest.fixture
    def config(self):
        """Fixture providing S3 config."""
        return S3Config(
            endpoint='https://test-endpoint.example.com:9000',
            access_key='test-access-key',
            secret_key='test-secret-key',
            region='us-east-1',
        )

    @pytest.fixture
    def client_with_mock(self, config):
        """Fixture providing S3Client with mocked boto3."""
        mock_boto = MagicMock()
        with patch('thumbnailer.s3_client.boto3.client', return_value=mock_boto) as factory:
            client = S3Client(config)
            # Store refs so tests can configure mock behavior
            client._test_mock = mock_boto
            client._test_factory = factory
            yield client

    def test_client_configuration(self, client_with_mock, config):
        """boto3 receives the configured endpoint and credentials."""
        _, kwargs = client_with_mock._test_factory.call_args

        assert kwargs['endpoint_url'] == config.endpoint
        assert kwargs['aws_access_key_id'] == 'test-access-key'
        assert kwargs['aws_secret_access_key'] == 'test-secret-key'
        assert kwargs['region_name'] == 'us-east-1'
        assert kwargs['verify'] is True

    def test_default_credential_chain(self):
        """Without keys boto3 resolves credentials itself."""
        with patch('thumbnailer.s3_client.boto3.client') as factory:
            S3Client(S3Config())

        _, kwargs = factory.call_args
        assert kwargs['aws_access_key_id'] is None
        assert kwargs['aws_secret_access_key'] is None
        assert kwargs['endpoint_url'] is None

    def test_s3_key(self):
        """Leading slashes are stripped from keys."""
        assert S3Client.s3_key('/photos/cat.jpg') == 'photos/cat.jpg'
        assert S3Client.s3_key('photos/cat.jpg') == 'photos/cat.jpg'

    def test_download_object(self, client_with_mock):
        """Test downloading an object."""
        mock_body = MagicMock()
        mock_body.read.return_value = b'image data'
        client_with_mock._test_mock.get_object.return_value = {'Body': mock_body}

        result = client_with_mock.download_object('bucket', '/some/key.jpg')

        assert result == b'image data'
        client_with_mock._test_mock.get_object.assert_called_once_with(
            Bucket='bucket', Key='some/key.jpg'
        )

    def test_upload_object(self, client_with_mock):
        """Uploads are public-read by default."""
        client_with_mock.upload_object('bucket', 'some/key.jpg', b'data', 'image/jpeg')

        client_with_mock._test_mock.put_object.assert_called_once_with(
            Bucket='bucket',
            Key='some/key.jpg',
            Body=b'data',
            ContentType='image/jpeg',
            ACL='public-read',
        )

    def test_upload_object_custom_acl(self, client_with_mock):
        """The ACL can be overridden per call."""
        client_with_mock.upload_object('bucket', 'key.jpg', b'data', 'image/jpeg', acl='private')

        _, kwargs = client_with_mock._test_mock.put_object.call_args
        assert kwargs['ACL'] == 'private'
