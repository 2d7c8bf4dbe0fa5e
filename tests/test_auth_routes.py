def test_register_login_logout_flow(app):
    c = app.test_client()
    resp = c.post('/api/register', json={'username': 'erin', 'password': 'secret-pass'})
    assert resp.status_code == 201
    assert c.get('/api/user').get_json()['username'] == 'erin'

    assert c.post('/api/logout').status_code == 204
    assert c.get('/api/user').status_code == 401

    assert c.post('/api/login', json={'username': 'erin', 'password': 'wrong-pass'}).status_code == 401
    resp = c.post('/api/login', json={'username': 'erin', 'password': 'secret-pass'})
    assert resp.status_code == 200
    assert resp.get_json()['username'] == 'erin'


def test_register_rejects_bad_input(app, client):
    c = app.test_client()
    assert c.post('/api/register', json={'username': '', 'password': 'secret-pass'}).status_code == 400
    assert c.post('/api/register', json={'username': 'frank', 'password': '123'}).status_code == 400
    resp = c.post('/api/register', json={'username': 'alice', 'password': 'secret-pass'})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Username already exists'
