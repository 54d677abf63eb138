"""
Tests for the headless CLI (analyze / scale subcommands).
"""
import json
import numpy as np
import pytest
from PIL import Image

from headless import build_parser, main


@pytest.fixture
def sheet_path(tmp_path):
    """4 x (128x196) sheet; the SOUTH frame is opaque below y=4"""
    sheet = np.zeros((196, 512, 4), dtype=np.uint8)
    sheet[4:196, 256:384] = (120, 100, 80, 255)
    path = tmp_path / 'tall_block.png'
    Image.fromarray(sheet).save(path)
    return path


class TestScaleCommand:

    def test_json(self, capsys):
        assert main(['scale', '--grid-width', '200', '--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['spriteScale'] == 0.5
        assert [layer['verticalOffset'] for layer in data['zLayerHeights']] == [0, 18, 98]

    def test_sprite_scale_text(self, capsys):
        assert main(['scale', '--sprite-scale', '1.5']) == 0
        out = capsys.readouterr().out
        assert 'Grid width:   600' in out
        assert 'Ratio lock:   on' in out

    def test_unlocked(self, capsys):
        main(['scale', '--grid-width', '300', '--unlocked', '--json'])
        data = json.loads(capsys.readouterr().out)
        assert data['spriteScale'] == 1.0
        assert data['baseGridDiamondWidth'] == 300

    def test_requires_one_driver(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['scale'])


class TestAnalyzeCommand:

    def test_json(self, sheet_path, capsys):
        assert main(['analyze', str(sheet_path), '--policy', 'round_down', '--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['spriteName'] == 'tall_block'
        assert (data['frameWidth'], data['frameHeight']) == (128, 196)
        assert data['rawVerticalBias'] == 132
        settings = data['settings']
        assert settings['autoComputedVerticalBias'] == 132
        assert settings['horizontalOffset'] == 1
        assert settings['spriteBoundingBox']['boundingY'] == 4
        assert settings['spriteBoundingBox']['boundingHeight'] == 192

    def test_default_policy_snaps(self, sheet_path, capsys):
        main(['analyze', str(sheet_path), '--json'])
        data = json.loads(capsys.readouterr().out)
        assert data['policy'] == 'snap_to_nearest'
        assert data['settings']['autoComputedVerticalBias'] == 204

    def test_wall_by_name(self, sheet_path, capsys):
        assert main(['analyze', 'tall_block', '--sprites-root', str(sheet_path.parent),
                     '--asset-type', 'wall', '--json']) == 0
        settings = json.loads(capsys.readouterr().out)['settings']
        assert settings['useAutoComputed'] is False
        assert settings['gridAnchor']['gridAnchorPoint'] == 'south_edge'
        assert settings['autoComputedVerticalBias'] == 196

    def test_text_output(self, sheet_path, capsys):
        main(['analyze', str(sheet_path), '--policy', 'round_up'])
        out = capsys.readouterr().out
        assert 'Vertical bias: 132 (round_up)' in out
        assert 'Bounding box:  x=0 y=4 w=128 h=192' in out

    def test_missing_sheet(self, tmp_path, capsys):
        assert main(['analyze', str(tmp_path / 'nope.png')]) == 1
        assert 'Sprite sheet not found' in capsys.readouterr().out

    def test_unreadable_sheet(self, tmp_path, capsys):
        broken = tmp_path / 'broken.png'
        broken.write_bytes(b'not a png')
        assert main(['analyze', str(broken)]) == 1
        assert 'Could not read sprite sheet' in capsys.readouterr().out
