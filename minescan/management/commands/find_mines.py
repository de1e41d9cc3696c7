"""Management command to find mines in grid screenshots on disk."""
from pathlib import Path

import cv2
from django.core.management.base import BaseCommand, CommandError

from minescan.exceptions import ImageDecodeError
from minescan.image_processing.cell_analyzer import (
    MAX_LEVEL,
    analyze_grid,
    visualize_findings,
)
from minescan.image_processing.decoding import load_image


class Command(BaseCommand):
    help = 'Detect grid cells in images and list the dark ones'

    def add_arguments(self, parser):
        parser.add_argument('images', nargs='+', type=Path)
        parser.add_argument(
            '--min-level', type=int, default=0,
            help=f'Lowest darkness level to report (0-{MAX_LEVEL})',
        )
        parser.add_argument(
            '--output-dir', type=Path,
            help='Write an annotated PNG per image into this directory',
        )

    def handle(self, *args, **options):
        min_level = options['min_level']
        if not 0 <= min_level <= MAX_LEVEL:
            raise CommandError(f'--min-level must be between 0 and {MAX_LEVEL}')

        output_dir = options['output_dir']
        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)

        total = 0
        for img_path in options['images']:
            try:
                image = load_image(img_path)
            except ImageDecodeError as e:
                self.stdout.write(f'  SKIP {img_path.name}: {e}')
                continue

            analysis = analyze_grid(image, min_level)
            rows = max(len(analysis['grid_lines_h']) - 1, 0)
            cols = max(len(analysis['grid_lines_v']) - 1, 0)
            self.stdout.write(
                f'  OK {img_path.name}: {cols}x{rows} cells, '
                f'{len(analysis["mines"])} mines'
            )
            for mine in analysis['mines']:
                self.stdout.write(
                    f'{img_path.name} | x={mine["x"]:3d} | y={mine["y"]:3d} '
                    f'| level={mine["level"]:3d}'
                )
            total += len(analysis['mines'])

            if output_dir is not None:
                out_path = output_dir / f'{img_path.stem}_mines.png'
                cv2.imwrite(str(out_path), visualize_findings(image, analysis))
                self.stdout.write(f'  Wrote {out_path}')

        self.stdout.write(f'\nFound {total} mines at level >= {min_level}')
