import spatial_led.__main__ as cli

WALL = 'center (0, 0)\ndensity 1.1\nsegment (10, -5) -> (10, 5)\n'


def _write(tmp_path, text=WALL, name='wall.sled'):
    path = tmp_path / name
    path.write_text(text, encoding='utf-8')
    return str(path)


def test_main_prints_summary(tmp_path, capsys):
    assert cli.main([_write(tmp_path)]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[:4] == ['LEDs: 11', 'Segments: 1', 'Vertices: 2', 'Center: (0.0000, 0.0000)']
    assert out[4].startswith('Domain: (10.0000, -5.0000) .. (10.0000, 5.0000)')


def test_main_runs_queries(tmp_path, capsys):
    args = [
        _write(tmp_path),
        '--angle', '0',
        '--angle', '180',
        '--dir', '10,3',
        '--closest', '3,4',
        '--at', '10.5',
        '--within', '10.5',
    ]

    assert cli.main(args) == 0

    out = capsys.readouterr().out
    assert 'angle 0: led 5 segment 0 at' in out
    assert 'occupancy 1.000' in out
    assert 'angle 180: miss' in out
    assert 'dir 10,3: led 8 segment 0' in out
    assert 'closest 3,4: led 9 at (10.0000, 4.0000)' in out
    assert 'at 10.5: 2, 8' in out
    assert 'within 10.5: 2, 3, 4, 5, 6, 7, 8' in out


def test_main_prints_canonical_layout(tmp_path, capsys):
    assert cli.main([_write(tmp_path), '--print-layout']) == 0

    out = capsys.readouterr().out
    assert out.startswith('center (0, 0)\ndensity 1.1\nsegment (10, -5) -> (10, 5)\n')


def test_main_reports_empty_selection(tmp_path, capsys):
    assert cli.main([_write(tmp_path), '--within', '1']) == 0

    assert 'within 1: (none)' in capsys.readouterr().out


def test_main_fails_on_bad_layout(tmp_path, capsys):
    path = _write(tmp_path, 'center (0, 0)\nsegment (0, 0) -> (1, 0)\n')

    assert cli.main([path]) == 1
    assert 'error:' in capsys.readouterr().err


def test_main_fails_on_missing_file(tmp_path, capsys):
    assert cli.main([str(tmp_path / 'nope.toml')]) == 1
    assert 'error:' in capsys.readouterr().err


def test_main_rejects_negative_distance(tmp_path, capsys):
    assert cli.main([_write(tmp_path), '--at', '-1']) == 2
    assert 'error:' in capsys.readouterr().err
