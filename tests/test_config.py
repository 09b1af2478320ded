from lib.config import Settings

def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv('TWILIO_ACCOUNT_SID', 'ACenv')
    monkeypatch.setenv('ROBOFLOW_MODEL_ID', 'skin')
    monkeypatch.setenv('ROBOFLOW_MODEL_VERSION', '2')
    monkeypatch.setenv('PORT', '8080')

    settings = Settings()

    assert settings.twilio_account_sid == 'ACenv'
    assert settings.port == 8080
    assert settings.detection_url == 'https://detect.roboflow.com/skin/2'

def test_settings_defaults(monkeypatch):
    monkeypatch.delenv('PORT', raising=False)
    settings = Settings()

    assert settings.port == 3000
    assert settings.transcription_poll_interval == 3.0
    assert settings.openrouter_model == 'deepseek/deepseek-r1'

def test_twilio_basic_auth(settings):
    auth = settings.twilio_basic_auth
    assert auth.login == 'ACtest'
    assert auth.password == 'twilio-token'
