# texdecode

Pure-Python decoders for GPU block-compressed texture formats. Each image
decoder takes the raw compressed bytes and the image size and returns the
decoded image as `bytes`: four bytes per pixel in B, G, R, A order, rows top
to bottom.

Supported formats:

- BC1 (DXT1), BC1 with 1-bit alpha, BC2 (DXT3), BC3 (DXT5), BC4, BC5
- BC6H, signed and unsigned (tone-mapped to 8 bits per channel)
- BC7
- ATC RGB and ATC RGBA (interpolated alpha)
- ASTC 2D, LDR and HDR endpoint modes, any block footprint of at most
  144 pixels; fixed-size helpers for 4x4 up to 12x12

The package needs nothing outside the standard library.

## Installation

```
pip install texdecode
```

## Decoding images

```python
from texdecode.bcn import decode_bc1, decode_bc7
from texdecode.astc import decode_astc, decode_astc_6_6
from texdecode.atc import decode_atc_rgba8

with open("texture.bc7", "rb") as f:
    raw = f.read()

pixels = decode_bc7(raw, 256, 256)  # 256 * 256 * 4 bytes, BGRA
```

Image decoders by module:

- `texdecode.bcn`: `decode_bc1`, `decode_bc1a`, `decode_bc2`, `decode_bc3`,
  `decode_bc4`, `decode_bc5`, `decode_bc6_signed`, `decode_bc6_unsigned`,
  `decode_bc6(data, width, height, signed)`, `decode_bc7`
- `texdecode.atc`: `decode_atc_rgb4`, `decode_atc_rgba8`
- `texdecode.astc`: `decode_astc(data, width, height, block_width, block_height)`
  and `decode_astc_4_4`, `decode_astc_5_4`, `decode_astc_5_5`,
  `decode_astc_6_5`, `decode_astc_6_6`, `decode_astc_8_5`, `decode_astc_8_6`,
  `decode_astc_8_8`, `decode_astc_10_5`, `decode_astc_10_6`,
  `decode_astc_10_8`, `decode_astc_10_10`, `decode_astc_12_10`,
  `decode_astc_12_12`

All take `(data, width, height)` unless shown otherwise. Image dimensions do
not need to be multiples of the block size; partial edge blocks are cropped.
Bytes beyond those the image needs are ignored.

BC4 output holds the value in the red channel, BC5 in red and green; the
other channels are zero.

## Decoding single blocks

Each format also has a block decoder that returns a list of pixels as 32-bit
integers (`b | g << 8 | r << 16 | a << 24`), for example
`texdecode.bc.decode_bc1_block(data)`, `texdecode.bc6.decode_bc6_block(data, signed)`,
`texdecode.bc7.decode_bc7_block(data)`,
`texdecode.atc.decode_atc_rgb4_block(data)` and
`texdecode.astc.decode_astc_block(buf, block_width, block_height)`.
`texdecode.color.pixels_to_bytes(pixels)` turns such a list into BGRA bytes,
and `texdecode.color.decode_blocks(...)` drives any block decoder over a
whole image.

## Errors

A `ValueError` is raised when:

- the data holds fewer bytes than the image needs;
- an ASTC block size covers more than 144 pixels, or is narrower or shorter
  than 2 pixels;
- an ASTC block uses a mode that cannot be decoded or needs more than 128 bits;
- a single-block decoder for BC6H, BC7 or ASTC is given fewer than 16 bytes.

## What the package does not do

It decodes raw block data only. It does not read texture container files
(DDS, KTX, PVR, ASTC headers), does not handle mipmaps, cube maps or 3D
ASTC blocks, does not encode, and has no command-line tool.

## Converting the result

The output is BGRA. To load it with Pillow, for example:

```python
from PIL import Image

image = Image.frombytes("RGBA", (width, height), pixels, "raw", "BGRA")
```

## Running the tests

```
pip install -e ".[test]"
pytest
```