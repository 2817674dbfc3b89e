from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from pakfile.errors import PakError
from pakfile.lmp import LmpImage
from pakfile.palette import Palette
from pakfile.reader import PakReader
from pakfile.records import DirectoryEntry
from pakfile.writer import create_pak


def cmd_create(output: str, source: str, *, quiet: bool = False) -> bool:
    """Create a new archive from a directory tree.

    Args:
        output: Path to the archive file to write.
        source: Directory whose regular files are stored, named relative to it.
        quiet: Suppress per-file lines; only the summary is printed.
    """
    print(f"Creating PAK file {output} from folder {source}")
    t0 = time.time()
    total = 0

    def _added(e: DirectoryEntry) -> None:
        nonlocal total
        total += e.length
        if not quiet:
            print(f"     adding: {e.name} ({e.length} bytes)")

    with create_pak(source, output, on_entry=_added) as pak:
        n_files = len(pak)
        dir_offset = pak.header.dir_offset

    dt = max(0.000001, time.time() - t0)
    mib = total / (1024.0 * 1024.0)
    print(f"Done: {n_files} files; {mib:.2f} MiB in {dt:.1f}s; directory at offset {dir_offset}")
    return True


def cmd_extract(archive: str, outdir: str, *, quiet: bool = False) -> bool:
    """Extract every member of ``archive`` under ``outdir``."""
    print(f"Extracting PAK file {archive} to {outdir}")

    def _written(e: DirectoryEntry, dst: str) -> None:
        if not quiet:
            print(f" extracting: {e.name}")

    with PakReader(archive) as pak:
        count = pak.extract_all(outdir, on_entry=_written)
    print(f"Done: {count} files extracted")
    return True


def cmd_list(archive: str) -> bool:
    """Print one ``position<TAB>length<TAB>name`` line per member."""
    with PakReader(archive) as pak:
        for e in pak.list():
            print(f"{e.position}\t{e.length}\t{e.name}")
    return True


def cmd_lmp2img(lmp_path: str, out_path: str, palette_path: str) -> bool:
    """Render an indexed LMP image through a palette into a regular image file."""
    print(f"Converting {lmp_path} to {out_path} with palette file {palette_path}")
    with open(lmp_path, "rb") as f:
        lmp = LmpImage.read(f)
    with open(palette_path, "rb") as f:
        palette = Palette.read(f)
    lmp.save_as(out_path, palette)
    return True


def cmd_img2lmp(image_path: str, lmp_out: str, palette_out: str) -> bool:
    """Split a regular image into an LMP image and the palette it indexes."""
    print(f"Converting {image_path} to LMP file {lmp_out} with palette file {palette_out}")
    with Image.open(image_path) as img:
        palette = Palette.from_image(img)
        lmp = LmpImage.from_image(img, palette)
    with open(lmp_out, "wb") as f:
        lmp.write(f)
    with open(palette_out, "wb") as f:
        palette.write(f)
    return True


def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(prog="pakfile", description="PACK archive tool")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_create = sub.add_parser("create", help="Create an archive from a directory")
    ap_create.add_argument("output", help="Output archive path")
    ap_create.add_argument("source", help="Source directory")
    ap_create.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_extract = sub.add_parser("extract", help="Extract all members")
    ap_extract.add_argument("archive", help="Archive path")
    ap_extract.add_argument("outdir", help="Destination directory")
    ap_extract.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_list = sub.add_parser("list", help="List archive contents")
    ap_list.add_argument("archive", help="Archive path")

    ap_lmp2img = sub.add_parser("lmp2img", help="Convert an LMP image to a regular image file")
    ap_lmp2img.add_argument("lmp", help="Input LMP file")
    ap_lmp2img.add_argument("output", help="Output image (format from extension)")
    ap_lmp2img.add_argument("palette", help="Palette file")

    ap_img2lmp = sub.add_parser("img2lmp", help="Convert an image to an LMP file plus palette")
    ap_img2lmp.add_argument("image", help="Input image")
    ap_img2lmp.add_argument("lmp", help="Output LMP file")
    ap_img2lmp.add_argument("palette", help="Output palette file")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "create":
            ok = cmd_create(args.output, args.source, quiet=args.quiet)
        elif args.cmd == "extract":
            ok = cmd_extract(args.archive, args.outdir, quiet=args.quiet)
        elif args.cmd == "list":
            ok = cmd_list(args.archive)
        elif args.cmd == "lmp2img":
            ok = cmd_lmp2img(args.lmp, args.output, args.palette)
        elif args.cmd == "img2lmp":
            ok = cmd_img2lmp(args.image, args.lmp, args.palette)
        else:
            raise RuntimeError("Unknown command")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except UnidentifiedImageError as e:
        print(f"Error: unsupported image: {e}", file=sys.stderr)
        sys.exit(2)
    except (PakError, OSError, ValueError, RuntimeError) as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(2)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
