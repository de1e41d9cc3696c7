from io import StringIO

import cv2
import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


def _run(*args):
    out = StringIO()
    call_command('find_mines', *args, stdout=out)
    return out.getvalue()


def test_find_mines_lists_dark_cells(tmp_path, board):
    path = tmp_path / 'board.png'
    cv2.imwrite(str(path), board)

    output = _run(str(path), '--min-level', '50')

    assert 'OK board.png: 2x2 cells, 1 mines' in output
    assert 'board.png | x=  1 | y=  0 | level=100' in output
    assert 'Found 1 mines at level >= 50' in output


def test_find_mines_writes_annotated_image(tmp_path, board):
    path = tmp_path / 'board.png'
    cv2.imwrite(str(path), board)
    out_dir = tmp_path / 'out'

    _run(str(path), '--min-level', '50', '--output-dir', str(out_dir))

    annotated = cv2.imread(str(out_dir / 'board_mines.png'))
    assert annotated is not None
    assert annotated.shape == board.shape + (3,)


def test_find_mines_skips_unreadable_images(tmp_path):
    output = _run(str(tmp_path / 'missing.png'))

    assert 'SKIP missing.png' in output
    assert 'Found 0 mines' in output


def test_find_mines_rejects_out_of_range_level(tmp_path):
    with pytest.raises(CommandError):
        _run(str(tmp_path / 'board.png'), '--min-level', '150')
