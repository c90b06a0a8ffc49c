"""
Pytest fixtures for thumbnailer tests.
"""

import io

import pytest
from PIL import Image


def make_gradient(size=(400, 200), mode='RGB'):
    """Image with distinct pixel values so resampling differences show up."""
    img = Image.linear_gradient('L').resize(size)
    rgb = Image.merge('RGB', (img, img.transpose(Image.Transpose.FLIP_LEFT_RIGHT), img))
    return rgb.convert(mode)


@pytest.fixture
def s3_config():
    """Fixture providing S3 configuration."""
    from thumbnailer.s3_config import S3Config

    return S3Config(
        endpoint='https://test-endpoint.example.com:9000',
        access_key='test-access-key',
        secret_key='test-secret-key',
        region='us-east-1',
    )


@pytest.fixture
def mock_s3_client():
    """Fixture providing a mocked S3Client."""
    from unittest.mock import MagicMock
    from thumbnailer.s3_client import S3Client

    mock = MagicMock(spec=S3Client)
    mock.upload_object.return_value = None
    return mock


@pytest.fixture
def store_context(s3_config, mock_s3_client):
    """Fixture providing a StoreContext wired to the mocked S3Client."""
    from thumbnailer.store import StoreContext

    return StoreContext(s3_config=s3_config, s3_client=mock_s3_client)


@pytest.fixture
def sample_image():
    """Fixture providing a 400x200 RGB image."""
    return make_gradient()


@pytest.fixture
def sample_image_bytes(sample_image):
    """Fixture providing sample JPEG image bytes."""
    buffer = io.BytesIO()
    sample_image.save(buffer, format='JPEG')
    return buffer.getvalue()


@pytest.fixture
def sample_png_bytes(sample_image):
    """Fixture providing sample PNG image bytes."""
    buffer = io.BytesIO()
    sample_image.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def source_dir(tmp_path):
    """Directory holding source images."""
    path = tmp_path / 'src'
    path.mkdir()
    return path


@pytest.fixture
def dst_dir(tmp_path):
    """Directory receiving thumbnails."""
    path = tmp_path / 'dst'
    path.mkdir()
    return path


@pytest.fixture
def source_png(source_dir, sample_image):
    """A lossless 400x200 source image on disk."""
    path = source_dir / 'cat.png'
    sample_image.save(path, format='PNG')
    return path


@pytest.fixture
def source_jpg(source_dir, sample_image):
    """A 400x200 JPEG source image on disk."""
    path = source_dir / 'cat.jpg'
    sample_image.save(path, format='JPEG')
    return path


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
