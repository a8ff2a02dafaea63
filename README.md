# fotogallery

A publishing tool for photographers. Point it at folders of photos, describe
the sections in a `foto.toml` file, provide a page template, and it builds a
static gallery site with resized thumbnails and large images, ready to upload
anywhere.

## Installation

```
pip install fotogallery
```

## Usage

Run the commands from the directory that holds `foto.toml` and the
`templates/template.html` page template.

Export the site to a directory (`dist` by default):

```
fotogallery export
fotogallery export --output public --minimize
```

The output directory is removed and rebuilt. It receives `index.html`
rendered from the template, the resized photos under
`photos/<slug>/thumbnail/<file>` and `photos/<slug>/original/<file>`
(JPEG-encoded, keeping the source file name), and a copy of every folder
listed under `[others]`. With `--minimize`, HTML, CSS and JavaScript files in
the output are minified.

Preview the site on a local web server while you work (port 5000 by default):

```
fotogallery preview
fotogallery preview --port 8080
```

The preview renders the template at `/`, resizes photos on request at
`/photos/<slug>/thumbnail/<file>` and `/photos/<slug>/original/<file>`, and
serves each folder listed under `[others]` at `/<folder>/`.

Resized images are kept in a local `.foto` cache, keyed by the source file's
SHA-256 checksum, the output size and the JPEG quality, so later exports are
fast. To remove it:

```
fotogallery clear-cache
```

Print the version:

```
fotogallery version
```

Add `--verbose` (or `-v`) to any command for debug output. Errors are logged
and the command exits with status 1.

## Configuration

`foto.toml` holds an `[image]` table with the default sizes, a `[[section]]`
table for each gallery section, and an optional `[others]` table listing
extra folders to copy into the site. Keys are matched case-insensitively.

```toml
[image]
thumbnailWidth = 640
originalWidth = 2048
compressQuality = 75

[[section]]
title = "Section 1"
text = "Photos from the summer"
slug = "section-1"
folder = "photos/section-1"
ascending = false

[others]
folders = ["assets", "media"]
```

`compressQuality` defaults to 75. Slugs may contain only letters, digits,
underscores and hyphens, and must be unique. A section may override
`thumbnailWidth`, `minThumbnailHeight`, `originalWidth` and
`minOriginalHeight`; when an image scaled to the width would be shorter than
the minimum height, it is scaled up to that height instead. Photos (`.jpg`,
`.jpeg`, `.png`, `.webp`) are found in the section folder and its
subfolders, sorted by file name, ascending or descending. Sections with no
supported photos are left out.

## Templates

`templates/template.html` is a Jinja2 template. It receives:

- `Config`: every setting from `foto.toml` with lower-cased keys, plus
  `photoswipeversion` and `photoswipecaptionpluginversion`.
- `Sections`: the indexed sections, each with `title`, `text` (inserted
  without escaping), `slug`, `folder`, `ascending` and `image_sets`. Each
  image set has `file_name`, `thumbnail_size` and `original_size` (with
  `width` and `height`), `compress_quality` and `exif`, a dictionary of EXIF
  tag names to text values.

## Using it as a library

```python
from fotogallery.config import load_config
from fotogallery.indexer import build

cfg = load_config("foto.toml")
sections = build(cfg.section_metadata, cfg.extract_option)
for section in sections:
    print(section.slug, [image.file_name for image in section.image_sets])
```

`fotogallery.images` offers `get_photo_size`, `aspected_size`,
`resize_image`, `resize_data` and `get_exif_values`;
`fotogallery.minimize` offers `minify_css`, `minify_html` and `minify_js`;
`fotogallery.export.run_export` runs an export with a given configuration,
minimizer, cache and export context.

## What it does not do

There is no command to create a new site: you write `foto.toml`, the
`templates/template.html` template and any asset folders yourself. The
minifiers are simple whitespace and comment strippers, not full parsers.