import pytest
from PIL import Image

from fotogallery.images import (
    ImageSize,
    aspected_size,
    get_exif_values,
    get_photo_size,
    is_photo_supported,
    resize_data,
    resize_image,
)


def _make(path, size, fmt="JPEG", exif=None):
    img = Image.new("RGB", size, (120, 80, 40))
    if exif is not None:
        img.save(path, format=fmt, exif=exif)
    else:
        img.save(path, format=fmt)
    return str(path)


def test_photo_support():
    assert is_photo_supported("photo.jpg")
    assert is_photo_supported("photo.jpeg")
    assert is_photo_supported("photo.webp")
    assert is_photo_supported("photo.png")
    assert is_photo_supported("photo.JPG")
    assert not is_photo_supported("photo.xxx")


def test_get_photo_size(tmp_path):
    path = _make(tmp_path / "a.jpg", (1440, 1080))
    assert get_photo_size(path) == ImageSize(1440, 1080)


def test_get_photo_size_rotated(tmp_path):
    exif = Image.Exif()
    exif[0x0112] = 6
    path = _make(tmp_path / "r.jpg", (1080, 1440), exif=exif)
    assert get_photo_size(path) == ImageSize(1440, 1080)


def test_get_photo_size_missing():
    with pytest.raises(FileNotFoundError):
        get_photo_size("nonexisting-file.jpg")


def test_aspected_size():
    assert aspected_size(ImageSize(2048, 1536), 640, 0) == ImageSize(640, 480)
    assert aspected_size(ImageSize(2048, 1536), 640, 100) == ImageSize(640, 480)
    assert aspected_size(ImageSize(2048, 1536), 640, 768) == ImageSize(1024, 768)


def test_resize_image(tmp_path):
    src = _make(tmp_path / "a.jpg", (1440, 1080))
    out = tmp_path / "out" / "resized.jpg"
    with pytest.raises(FileNotFoundError):
        resize_image("nonexisting-file.jpg", str(out), 640, 0, 75)
    assert not out.exists()
    resize_image(src, str(out), 640, 0, 75)
    assert get_photo_size(str(out)) == ImageSize(640, 480)


def test_resize_with_rotation(tmp_path):
    exif = Image.Exif()
    exif[0x0112] = 6
    src = _make(tmp_path / "r.jpg", (1080, 1440), exif=exif)
    out = tmp_path / "resized.jpg"
    resize_image(src, str(out), 640, 0, 75)
    assert get_photo_size(str(out)) == ImageSize(640, 480)


def test_compress_quality(tmp_path):
    img = Image.effect_noise((400, 300), 60).convert("RGB")
    src = tmp_path / "n.jpg"
    img.save(src, quality=100)
    low = resize_data(str(src), 200, 0, 20)
    high = resize_data(str(src), 200, 0, 100)
    assert len(high) > len(low)


def test_png_support(tmp_path):
    src = _make(tmp_path / "t.png", (1024, 768), fmt="PNG")
    assert get_photo_size(src) == ImageSize(1024, 768)
    out = tmp_path / "resized.png"
    resize_image(src, str(out), 640, 0, 75)
    assert get_photo_size(str(out)) == ImageSize(640, 480)


def test_exact_dimensions(tmp_path):
    src = _make(tmp_path / "a.jpg", (100, 100))
    out = tmp_path / "o.jpg"
    resize_image(src, str(out), 30, 50, 75)
    assert get_photo_size(str(out)) == ImageSize(30, 50)


def test_get_image_exif(tmp_path):
    exif = Image.Exif()
    exif[270] = "A brand new description"
    exif[271] = "FUJIFILM"
    exif[272] = "GFX 50R"
    src = _make(tmp_path / "e.jpg", (10, 10), exif=exif)
    tags = get_exif_values(src)
    assert tags["ImageDescription"] == "A brand new description"
    assert tags["Make"] == "FUJIFILM"
    assert tags["Model"] == "GFX 50R"


def test_empty_image_description(tmp_path):
    src = _make(tmp_path / "e.jpg", (10, 10))
    assert get_exif_values(src).get("ImageDescription", "") == ""


def test_png_image_description(tmp_path):
    exif = Image.Exif()
    exif[270] = "A png new description"
    src = _make(tmp_path / "e.png", (10, 10), fmt="PNG", exif=exif)
    assert get_exif_values(src)["ImageDescription"] == "A png new description"


def test_exif_unsupported_format(tmp_path):
    path = tmp_path / "x.gif"
    Image.new("RGB", (4, 4)).save(path, format="GIF")
    with pytest.raises(ValueError):
        get_exif_values(str(path))