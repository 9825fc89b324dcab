def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['message'] == 'Welcome to the Drawcast receiver!'


def test_state_after_startup(client):
    res = client.get('/api/receiver/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['application_name'] == 'Drawcast'
    assert state['application_state'] == 'Game running.'
    assert state['gameplay_state'] == 'showing_info_screen'
    assert state['lobby_state'] == 'open'
    assert state['run_state'] == 'running'
    assert state['players'] == []
    assert state['has_words'] is False


def test_display_after_startup(client):
    display = client.get('/api/receiver/display').get_json()
    assert display['title'] == 'Lobby'
    assert display['info'] == ''
    assert display['grid_size'] == 10
    assert set(display['cells'].values()) == {'black'}


def test_session_reset_command(flask_app):
    session = flask_app.extensions['receiver'].session
    session.handle_player_ready('sid-1', {'name': 'Alice'})
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['session-reset'])
    assert 'Player registry has been reset!' in result.output
    assert session.get_players() == []
    assert flask_app.extensions['receiver'].game.players == {}


def test_run_module_builds_running_receiver():
    import run

    assert run.app.extensions['receiver'].game.is_running
    options = run.serve_options(run.app)
    assert options['host'] == run.app.config['HOST']
    assert options['port'] == run.app.config['PORT']
    assert isinstance(options['debug'], bool)
