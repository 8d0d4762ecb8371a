# retrotiles

Building blocks for a retro-style 2D graphics engine: indexed bitmaps and
palettes, scanline blitters, palette color cycles and sprite animations, a
simple actor pool, and loaders for common asset formats (Tiled `.tmx` maps,
`.sqx` sequence packs, `.act` palettes, PNG/BMP images and sprite atlases).

It is a library; it has no command-line program.

## Modules

| Module | What it offers |
| --- | --- |
| `retrotiles.loadfile` | `AssetLoader` opens and reads files relative to a base path; `split_filename`, `build_file_path`, `FileInfo` |
| `retrotiles.bitmap` | `Bitmap` (rows padded to four bytes), `Palette` of packed ARGB colors, `pack_rgb` |
| `retrotiles.blitters` | `get_blitter` for 8 or 32 bpp targets (keyed, scaled, blended), `blit_color`, `blit_mosaic_solid`, `blit_mosaic_blend` |
| `retrotiles.palettefile` | `load_palette` for `.act` color tables |
| `retrotiles.imageload` | `load_bitmap` reads PNG or BMP and reduces it to 8 bpp; `to_indexed` for 24/32 bpp bitmaps; `ImageFormatError` |
| `retrotiles.tmx` | `load_tmx` reads map size, background color, layers and tileset references into `TmxInfo` |
| `retrotiles.tilemap` | `load_tilemap` reads one tile layer (CSV or base64, optionally zlib-compressed) into a `Tilemap` of `Tile`s; `decode_csv` |
| `retrotiles.sequences` | `load_sequence_pack`, `parse_sequence_pack`, `SequencePack`, `Sequence`, `SequenceFrame`, `ColorStrip` |
| `retrotiles.spriteset` | `load_spriteset` loads an image plus a JSON, CSV or TXT atlas; `parse_atlas_json`, `parse_atlas_text` |
| `retrotiles.animation` | `Animator` with palette animation slots and one animation per sprite; `Animation`, `color_cycle`, `color_cycle_blend` |
| `retrotiles.actors` | `ActorPool`, `Actor`, `Rect`: fixed slots with motion, hitboxes, collision tests and timers |
| `retrotiles.sintable` | integer `calc_sin` / `calc_cos` over whole degrees with an 8-bit fraction |
| `retrotiles.base64` | lenient `decode` with an optional output limit |
| `retrotiles.crc` | `crc32` |
| `retrotiles.dlist` | `IndexList`, a doubly linked list over integer indices |

## Example

```python
from retrotiles.loadfile import AssetLoader
from retrotiles.tilemap import load_tilemap
from retrotiles.sequences import load_sequence_pack
from retrotiles.palettefile import load_palette
from retrotiles.animation import Animator

loader = AssetLoader("assets/sonic")
tilemap = load_tilemap(loader, "Sonic_md_fg1.tmx", None)
print(tilemap.rows, tilemap.cols, tilemap.tileset_path)

pack = load_sequence_pack(loader, "Sonic_md_seq.sqx")
water = pack.find("seq_water")

palette = load_palette(loader, "water.act")
animator = Animator(num_animations=4, num_sprites=8)
animator.set_palette_animation(0, palette, water, True)
for frame in range(600):
    animator.update(frame)
```

Sprite animations report each new picture through a callback given to
`Animator` as `on_sprite_frame(sprite_index, picture_index)`.

Errors raise exceptions rather than returning sentinel values: a missing
file raises `FileNotFoundError`, malformed data raises `ValueError` (or
`ImageFormatError` for images), a missing map layer raises `LookupError`,
and out-of-range slot indices raise `IndexError`.

## What it does not do

- There is no renderer: nothing composes layers and sprites into a frame,
  opens a window or reads input. The blitters work on single scanlines held
  in plain Python sequences.
- `load_tilemap` records the path of the map's tileset (`Tilemap.tileset_path`)
  but does not load the tileset itself.
- `load_spriteset` returns the image and the atlas entries; it does not cut
  the image into separate sprite bitmaps.
- Assets are read only from plain files; there is no support for packed or
  encrypted resource archives.
- Gzip-compressed tile layer data is not supported.

## Tests

The test suite uses pytest, which the `test` extra installs.