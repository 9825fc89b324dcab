from receiver.display import CELL, Display, cell_key


def test_builds_title_info_and_grid():
    display = Display(grid_size=3, empty_color='black')
    assert display.get('title').text == ''
    assert display.get('info').text == ''
    cells = display.elements_of_kind(CELL)
    assert len(cells) == 9
    assert all(c.background == 'black' for c in cells)
    assert display.get(cell_key(2, 2)) is not None
    assert display.get(cell_key(3, 0)) is None


def test_unknown_keys_are_ignored():
    changes = []
    display = Display(grid_size=2, on_change=changes.append)
    assert display.set_text('nope', 'hello') is False
    assert display.set_background('nope', 'blue') is False
    assert display.set_background(None, 'blue') is False
    assert changes == []


def test_changes_are_reported():
    changes = []
    display = Display(grid_size=2, on_change=changes.append)
    display.set_text('info', 'Alice has joined.')
    display.set_background(cell_key(0, 1), 'blue')
    painted = display.set_background_by_type(CELL, 'black')
    assert painted == 4
    assert changes == [
        {'key': 'info', 'text': 'Alice has joined.'},
        {'key': 'cell-0-1', 'background': 'blue'},
        {'kind': 'td', 'background': 'black'},
    ]


def test_snapshot():
    display = Display(grid_size=2, empty_color='white')
    display.set_text('title', 'Lobby')
    display.set_background(cell_key(1, 0), 'blue')
    snap = display.snapshot()
    assert snap['grid_size'] == 2
    assert snap['title'] == 'Lobby'
    assert snap['cells'] == {
        'cell-0-0': 'white',
        'cell-1-0': 'blue',
        'cell-0-1': 'white',
        'cell-1-1': 'white',
    }
