#!/usr/bin/env python3
"""
Spritesheet Frame Extraction Tool - Command Line Interface

Splits a generated character spritesheet into clean, equally sized animation
frames. Each row of the sheet holds one animation ("idle", "run", ...), but
the number, spacing and width of the frames within a row are not known in
advance: frames are found from the content itself by detecting empty column
gaps, and rows where frames were drawn touching are split again at their
thinnest points.
"""

import logging
import sys
from pathlib import Path
import click
import cv2

from spritesheet_frames.api import extract_animations
from spritesheet_frames.config import AnchorMode, BandStrategy, DedupMode, ExtractionConfig
from spritesheet_frames.errors import SpritesheetError
from spritesheet_frames.sprite_save import save_animations, save_debug_images


def _parse_frame_counts(_ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]) -> dict[str, int]:
    counts = {}
    for value in values:
        name, sep, count = value.partition("=")
        if not sep or not count.isdigit():
            raise click.BadParameter(f"expected NAME=COUNT, got '{value}'")
        counts[name.strip()] = int(count)
    return counts


@click.command(context_settings=dict(show_default=True))
@click.argument('input_path', type=click.Path(exists=True))
@click.argument('output_path', type=click.Path())
@click.option('--rows', '-r', default='idle,run', help='Comma-separated animation names, one per row, top to bottom')
@click.option('--band-strategy', '-b', type=click.Choice([s.value for s in BandStrategy]), default='fixed',
              help='Divide the height evenly, or detect content bands')
@click.option('--manual', '-m', is_flag=True, help='Disable frame detection, divide rows into equal columns')
@click.option('--frame-count', '-f', multiple=True, callback=_parse_frame_counts,
              help='Frame count for manual mode, as NAME=COUNT (repeatable)')
@click.option('--dedup', type=click.Choice([m.value for m in DedupMode]), default='split',
              help='Which frames are checked for near-duplicates')
@click.option('--anchor', type=click.Choice([a.value for a in AnchorMode]), default='center',
              help='Horizontal anchoring of frames on the canvas')
@click.option('--key-background', '-k', is_flag=True, help='Make background-colored pixels inside frames transparent')
@click.option('--coarse-threshold', type=float, default=0.36, help='Color distance for content detection')
@click.option('--fine-threshold', type=float, default=0.15, help='Color distance for duplicate comparison')
@click.option('--min-gap', type=int, default=40, help='Minimum distance between frame gaps in pixels')
@click.option('--padding', '-p', type=int, default=4, help='Transparent padding around frames in pixels')
@click.option('--target-height', '-t', type=float, help='Visual height of the character in the renderer')
@click.option('--spritesheet', '-s', is_flag=True,
              help='Create a single spritesheet instead of individual files')
@click.option('--debug', '-d', is_flag=True, help='Save intermediate images for debugging')
@click.option('--verbose', '-v', is_flag=True, help='Log segmentation details')
def main(input_path: str, output_path: str, rows: str, band_strategy: str, manual: bool,
         frame_count: dict[str, int], dedup: str, anchor: str, key_background: bool,
         coarse_threshold: float, fine_threshold: float, min_gap: int, padding: int,
         target_height: float | None, spritesheet: bool, debug: bool, verbose: bool) -> None:
    """Extract normalized animation frames from a character spritesheet.

    The background color is taken from the top-left pixel. Frames are cropped
    to their content, placed on a canvas shared by all frames, centered
    horizontally and aligned to a common baseline.

    INPUT_PATH is the path to the input image file.

    OUTPUT_PATH is the base path where output images will be saved.

    If frames are detected incorrectly, try --band-strategy content for sheets
    whose rows drift vertically, or --manual with --frame-count for sheets
    laid out on a regular grid.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    # Load the image
    img = cv2.imread(input_path, cv2.IMREAD_UNCHANGED)
    if img is None:
        click.echo(f"Error: Could not load image from {input_path}", err=True)
        sys.exit(1)
    if img.ndim == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGRA)
    click.echo(f"Loaded image with shape {img.shape}")

    try:
        config = ExtractionConfig(
            coarse_threshold=coarse_threshold,
            fine_threshold=fine_threshold,
            min_gap_separation=min_gap,
            canvas_padding=padding,
            auto_detect=not manual,
            frame_counts=frame_count,
            band_strategy=BandStrategy(band_strategy),
            dedup_mode=DedupMode(dedup),
            anchor=AnchorMode(anchor),
            key_background=key_background,
        )
        animations = extract_animations(
            img,
            [name.strip() for name in rows.split(',') if name.strip()],
            config=config,
            debug=debug
        )
    except SpritesheetError as e:
        click.echo(f"Error processing image: {e}", err=True)
        sys.exit(1)

    for note in animations.notes:
        click.echo(f"Note: {note}")

    frame_w, frame_h = animations.frame_size
    click.echo(f"Frame size: {frame_w}x{frame_h}")
    for name, frames in animations.items():
        fps, loop = animations.playback(name)
        click.echo(f"  {name}: {len(frames)} frame(s), {fps:g} fps{', looping' if loop else ''}")
    if target_height:
        click.echo(f"Render scale for height {target_height:g}: {animations.render_scale(target_height):.3f}")

    if debug:
        debug_dir = Path("debug")
        num_debug_images = save_debug_images(animations.debug_images, debug_dir)
        click.echo(f"Saved {num_debug_images} debug image(s) to {debug_dir}")

    save_animations(animations, output_path, create_sheet=spritesheet)

    if spritesheet:
        click.echo(f"Spritesheet saved to {Path(output_path).parent}")
    else:
        click.echo(f"Frames saved to {Path(output_path).parent}")


if __name__ == "__main__":
    main()
