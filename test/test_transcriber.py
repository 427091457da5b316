import httpx
import pytest

from conftest import FakeRecognizer
from mindstream.errors import (
    MissingCredential,
    RecognitionFailed,
    UnknownProvider,
    UnsupportedCapability,
    UpstreamError,
)
from speech.audio import AudioPayload
from speech.providers.whisper_provider import WhisperProvider
from speech.transcriber import Transcriber

AUDIO = AudioPayload(data=b"\x1a\x45\xdf\xa3", mime_type="audio/webm;codecs=opus")


def test_browser_speech_uses_local_recognizer(settings_store, credentials):
    recognizer = FakeRecognizer(text="买菜，然后打扫房间")
    t = Transcriber(settings_store, credentials, local_recognizer=recognizer)
    assert t.transcribe(AUDIO, "u1") == "买菜，然后打扫房间"
    assert recognizer.calls == 1


def test_browser_speech_without_recognizer(settings_store, credentials):
    t = Transcriber(settings_store, credentials)
    with pytest.raises(UnsupportedCapability):
        t.transcribe(AUDIO, "u1")


def test_recognizer_error_is_single_attempt(settings_store, credentials):
    recognizer = FakeRecognizer(error=RuntimeError("no-speech"))
    t = Transcriber(settings_store, credentials, local_recognizer=recognizer)
    with pytest.raises(RecognitionFailed) as exc:
        t.transcribe(AUDIO, "u1")
    assert "no-speech" in exc.value.detail
    assert recognizer.calls == 1


def test_unknown_speech_provider(settings_store, credentials):
    settings_store.update("u1", speech_provider="ghost")
    with pytest.raises(UnknownProvider):
        Transcriber(settings_store, credentials).transcribe(AUDIO, "u1")


def test_text_only_provider_rejected_for_speech(settings_store, credentials):
    settings_store.update("u1", speech_provider="deepseek")
    with pytest.raises(UnknownProvider):
        Transcriber(settings_store, credentials).transcribe(AUDIO, "u1")


def test_openai_speech_requires_key(settings_store, credentials):
    settings_store.update("u1", speech_provider="openai", speech_model="whisper-1")
    with pytest.raises(MissingCredential):
        Transcriber(settings_store, credentials).transcribe(AUDIO, "u1")


def test_openai_speech_provider_selection(settings_store, credentials):
    settings_store.update("u1", speech_provider="openai", speech_model="gpt-4")
    credentials.set_api_key("u1", "openai", "sk-voice")
    provider = Transcriber(settings_store, credentials).provider_for("u1")
    assert isinstance(provider, WhisperProvider)
    assert provider.api_key == "sk-voice"
    assert provider.model == "whisper-1"


def test_whisper_multipart_request():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"text": "你好"})

    provider = WhisperProvider("sk-voice", transport=httpx.MockTransport(handler))
    assert provider.transcribe(AUDIO) == "你好"

    (req,) = seen
    assert str(req.url) == "https://api.openai.com/v1/audio/transcriptions"
    assert req.headers["Authorization"] == "Bearer sk-voice"
    assert req.headers["Content-Type"].startswith("multipart/form-data")
    body = req.read()
    assert b'name="model"' in body and b"whisper-1" in body
    assert b'name="language"' in body
    assert b'filename="audio.webm"' in body


def test_whisper_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={}))
    with pytest.raises(UpstreamError) as exc:
        WhisperProvider("k", transport=transport).transcribe(AUDIO)
    assert exc.value.status_text == "Internal Server Error"
