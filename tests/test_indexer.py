import pytest
from PIL import Image

from fotogallery.config import ExtractOption, SectionMetadata
from fotogallery.images import ImageSize
from fotogallery.indexer import (
    IndexBuildError,
    build,
    build_image_set,
    build_image_sets,
    section_extract_option,
    valid_slug,
)

DEFAULT = ExtractOption(thumbnail_width=640, original_width=2048, compress_quality=75)


def _collection(folder, names, size):
    folder.mkdir(parents=True)
    for name in names:
        Image.new("RGB", size, (10, 20, 30)).save(folder / name)
    return str(folder)


@pytest.fixture
def metas(tmp_path):
    c1 = _collection(tmp_path / "collection-1", ["2022-06-29.jpg", "2022-07-01.jpg", "2022-07-19.jpg"], (1440, 1080))
    c2 = _collection(tmp_path / "collection-2", ["2023-09-28.jpg", "2022-09-20.jpg", "2023-04-29.jpg"], (2324, 1536))
    m1 = SectionMetadata(title="Section 1", text="This is Section 1", slug="slug-section-1", folder=c1, ascending=True)
    m2 = SectionMetadata(
        title="Section 2", text="This is Section 2", slug="slug-section-2", folder=c2,
        ascending=False, min_thumbnail_height=768, min_original_height=1536,
    )
    return m1, m2


def test_valid_slug():
    assert valid_slug("abcde-efg_9999")
    assert not valid_slug("abcde efg_9999")
    assert not valid_slug("abcde-efgかたかな")
    assert not valid_slug("abcde.efg_999")
    assert not valid_slug("")


def test_build(metas):
    sections = build(list(metas), DEFAULT)
    assert len(sections) == 2
    assert sections[0].title == "Section 1"
    assert sections[0].text == "This is Section 1"
    assert len(sections[0].image_sets) == 3
    assert sections[0].image_sets[0].file_name == "2022-06-29.jpg"
    assert len(sections[1].image_sets) == 3
    assert sections[1].image_sets[0].file_name == "2023-09-28.jpg"


def test_build_size_override(metas):
    sections = build(list(metas), DEFAULT)
    first = sections[0].image_sets[0]
    assert first.thumbnail_size == ImageSize(640, 480)
    assert first.original_size == ImageSize(2048, 1536)
    second = sections[1].image_sets[0]
    assert second.thumbnail_size == ImageSize(1162, 768)
    assert second.original_size == ImageSize(2324, 1536)


def test_build_duplicated_slugs(metas):
    m1, m2 = metas
    m2.slug = m1.slug
    with pytest.raises(IndexBuildError):
        build([m1, m2], DEFAULT)


def test_build_invalid_slug(metas):
    m1, _ = metas
    m1.slug = "bad slug"
    with pytest.raises(IndexBuildError):
        build([m1], DEFAULT)


def test_build_empty_section(metas, tmp_path):
    m1, _ = metas
    (tmp_path / "empty").mkdir()
    empty = SectionMetadata(title="Empty Collection", slug="empty-slug-section", folder=str(tmp_path / "empty"))
    sections = build([m1, empty], DEFAULT)
    assert [s.title for s in sections] == ["Section 1"]


def test_build_image_sets_order(metas):
    folder = metas[0].folder
    names = ["2022-06-29.jpg", "2022-07-01.jpg", "2022-07-19.jpg"]
    assert [s.file_name for s in build_image_sets(folder, True, DEFAULT)] == names
    assert [s.file_name for s in build_image_sets(folder, False, DEFAULT)] == names[::-1]


def test_invalid_build_image_sets(tmp_path):
    assert build_image_sets(str(tmp_path / "folder-not-exist"), True, DEFAULT) == []


def test_build_image_set(metas):
    path = f"{metas[0].folder}/2022-06-29.jpg"
    image_set = build_image_set(path, DEFAULT)
    assert image_set.file_name == "2022-06-29.jpg"
    assert image_set.thumbnail_size == ImageSize(640, 480)
    assert image_set.original_size == ImageSize(2048, 1536)
    assert image_set.compress_quality == 75


@pytest.mark.parametrize(
    "global_option, meta, expected",
    [
        (ExtractOption(thumbnail_width=640, original_width=2048), SectionMetadata(),
         ExtractOption(thumbnail_width=640, original_width=2048)),
        (ExtractOption(thumbnail_width=640, original_width=2048),
         SectionMetadata(thumbnail_width=800, original_width=3000),
         ExtractOption(thumbnail_width=800, original_width=3000)),
        (ExtractOption(thumbnail_width=640, original_width=2048, min_original_height=1024),
         SectionMetadata(min_thumbnail_height=480, min_original_height=1366),
         ExtractOption(thumbnail_width=640, min_thumbnail_height=480, original_width=2048, min_original_height=1366)),
        (ExtractOption(640, 480, 2048, 1536), SectionMetadata(),
         ExtractOption(640, 480, 2048, 1536)),
    ],
)
def test_section_extract_option(global_option, meta, expected):
    assert section_extract_option(global_option, meta) == expected