"""图片工具函数单元测试."""

import pytest

from certforge.utils.exceptions import (
    AssetLoadError,
    AssetNotFoundError,
    AssetTooLargeError,
    UnsupportedAssetFormatError,
)
from certforge.utils.image_utils import (
    bytes_to_data_uri,
    data_uri_to_bytes,
    detect_mime_type,
    validate_image_file,
)


class TestValidateImageFile:
    """图片文件校验测试."""

    def test_valid(self, image_factory):
        validate_image_file(image_factory("ok.png"))

    def test_missing(self, temp_dir):
        with pytest.raises(AssetNotFoundError):
            validate_image_file(temp_dir / "missing.png")

    def test_directory_is_not_a_file(self, temp_dir):
        """测试目录不算文件."""
        with pytest.raises(AssetNotFoundError):
            validate_image_file(temp_dir)

    def test_extension_case_insensitive(self, image_factory):
        """测试扩展名大小写."""
        validate_image_file(image_factory("UPPER.PNG"))

    def test_unsupported(self, temp_dir):
        path = temp_dir / "doc.pdf"
        path.write_bytes(b"%PDF")
        with pytest.raises(UnsupportedAssetFormatError):
            validate_image_file(path)

    def test_too_large(self, image_factory):
        with pytest.raises(AssetTooLargeError):
            validate_image_file(image_factory("ok.png"), max_size=1)


class TestDetectMimeType:
    """MIME 类型识别测试."""

    def test_png(self, png_bytes):
        assert detect_mime_type(png_bytes) == "image/png"

    def test_jpeg(self, image_factory):
        assert detect_mime_type(image_factory("a.jpg").read_bytes()) == "image/jpeg"

    def test_empty(self):
        with pytest.raises(AssetLoadError):
            detect_mime_type(b"")

    def test_garbage(self):
        with pytest.raises(AssetLoadError):
            detect_mime_type(b"\x00\x01\x02garbage")

    def test_pixel_count_over_limit(self, oversized_image):
        """测试像素数超过解压上限的图片转为读取错误."""
        with pytest.raises(AssetLoadError):
            detect_mime_type(oversized_image.read_bytes(), str(oversized_image))


class TestDataUri:
    """data URI 编解码测试."""

    def test_encode(self):
        assert bytes_to_data_uri(b"abc", "image/png") == "data:image/png;base64,YWJj"

    def test_decode(self):
        assert data_uri_to_bytes("data:image/png;base64,YWJj") == b"abc"

    @pytest.mark.parametrize("uri", ["https://example.com/a.png", "data:text/plain,hello"])
    def test_decode_rejects_non_base64(self, uri):
        """测试非 base64 data URI."""
        with pytest.raises(ValueError):
            data_uri_to_bytes(uri)
