from PIL import Image
import io
import pytest

from menulens.config.settings import PreprocessSettings
from menulens.core.exceptions import (
    ImageCorruptedError,
    ImageTooLargeError,
    ImageValidationError,
    MenuLensException,
)
from menulens.services.image_preprocess import ImageCompressor


def image_bytes(size=(40, 40), fmt='PNG', mode='RGB', color='white'):
    img = Image.new(mode, size, color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def noise_bytes(size):
    img = Image.effect_noise(size, 80).convert('RGB')
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def test_small_image_keeps_size():
    prepared = ImageCompressor().compress(image_bytes((40, 30)))
    assert (prepared.width, prepared.height) == (40, 30)
    assert prepared.mime_type == 'image/jpeg'
    assert Image.open(io.BytesIO(prepared.content)).format == 'JPEG'


def test_longest_side_capped_keeping_aspect():
    prepared = ImageCompressor().compress(image_bytes((2048, 1024)))
    assert (prepared.width, prepared.height) == (1024, 512)

    decoded = Image.open(io.BytesIO(prepared.content))
    assert decoded.size == (1024, 512)


def test_custom_pixel_cap():
    compressor = ImageCompressor(PreprocessSettings(max_width_or_height=100))
    prepared = compressor.compress(image_bytes((300, 600)))
    assert (prepared.width, prepared.height) == (50, 100)


def test_byte_cap_enforced_on_noisy_image():
    settings = PreprocessSettings(max_size_mb=0.25)
    prepared = ImageCompressor(settings).compress(noise_bytes((1200, 1200)))
    assert prepared.size_bytes <= int(0.25 * 1024 * 1024)
    assert max(prepared.width, prepared.height) <= 1024


def test_transparent_image_converted():
    prepared = ImageCompressor().compress(image_bytes((20, 20), mode='RGBA', color=(0, 0, 0, 0)))
    assert Image.open(io.BytesIO(prepared.content)).mode == 'RGB'


def test_exif_orientation_applied():
    img = Image.new('RGB', (60, 20), color='white')
    exif = img.getexif()
    exif[0x0112] = 6  # rotate 90 CW on display
    buf = io.BytesIO()
    img.save(buf, format='JPEG', exif=exif.tobytes())

    prepared = ImageCompressor().compress(buf.getvalue())
    assert (prepared.width, prepared.height) == (20, 60)


def test_rejects_non_image():
    with pytest.raises(ImageValidationError):
        ImageCompressor().compress(b'not-an-image')


def test_rejects_empty_upload():
    with pytest.raises(ImageValidationError):
        ImageCompressor().compress(b'')


def test_rejects_oversized_upload():
    compressor = ImageCompressor(PreprocessSettings(max_upload_mb=1))
    with pytest.raises(ImageTooLargeError):
        compressor.compress(b'\0' * (1024 * 1024 + 1))


def test_truncated_image_rejected():
    data = noise_bytes((200, 200))
    with pytest.raises(MenuLensException) as exc_info:
        ImageCompressor().compress(data[: len(data) // 2])
    assert isinstance(exc_info.value, (ImageCorruptedError, ImageValidationError))


def test_data_url():
    prepared = ImageCompressor().compress(image_bytes())
    assert prepared.to_data_url().startswith('data:image/jpeg;base64,')


@pytest.mark.asyncio
async def test_prepare_runs_async():
    prepared = await ImageCompressor().prepare(image_bytes((10, 10)))
    assert prepared.width == 10


def test_decompression_bomb_rejected(monkeypatch):
    monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 1000)
    with pytest.raises(ImageValidationError) as exc_info:
        ImageCompressor().compress(image_bytes((100, 100)))
    assert exc_info.value.message == 'Image dimensions are too large'
