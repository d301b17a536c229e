import asyncio

import pytest
from pydantic import ValidationError

from slidecue.recognition.base import (
    EndEvent,
    ErrorEvent,
    RecognitionAlternative,
    RecognitionResult,
    RecognizerBusyError,
    ResultEvent,
    StartEvent,
)
from slidecue.recognition.relay import RelayRecognizer
from slidecue.recognition.session import RecognitionSession, SessionStatus
from slidecue.schemas.relay import (
    ControlMessage,
    HelloMessage,
    client_message_adapter,
)


def test_commands_carry_configuration():
    sent = []
    relay = RelayRecognizer(sent.append)
    relay.lang = "fr-FR"
    relay.continuous = True
    relay.start()
    relay.stop()
    relay.abort()
    assert [m["action"] for m in sent] == ["start", "stop", "abort"]
    assert sent[0] == {
        "type": "recognizer_command",
        "action": "start",
        "continuous": True,
        "interim_results": False,
        "lang": "fr-FR",
    }


def test_start_is_busy_until_end():
    relay = RelayRecognizer(lambda payload: None)
    relay.start()
    with pytest.raises(RecognizerBusyError):
        relay.start()
    relay.emit(StartEvent())
    assert relay.running
    with pytest.raises(RecognizerBusyError):
        relay.start()
    relay.emit(EndEvent())
    assert not relay.running
    relay.start()


def test_queued_events_drive_session_in_order(settings):
    sent = []
    results = []

    async def scenario():
        relay = RelayRecognizer(sent.append)
        session = RecognitionSession(relay, on_result=lambda t, f: results.append((t, f)), settings=settings)
        task = asyncio.create_task(relay.run())
        session.start()
        for event in (
            StartEvent(),
            ResultEvent(results=[RecognitionResult([RecognitionAlternative("good morning")], is_final=True)]),
            EndEvent(),
        ):
            relay.feed(event)
        relay.close()
        await task
        return session

    session = asyncio.run(scenario())
    assert results == [("good morning", True)]
    # unexpected end: auto-restart sent a second start command
    assert [m["action"] for m in sent] == ["start", "start"]
    assert session.status is SessionStatus.STARTING


def interim(text):
    return ResultEvent(results=[RecognitionResult([RecognitionAlternative(text)], is_final=False)])


def test_full_queue_keeps_lifecycle_events(settings):
    sent = []
    results = []

    async def scenario():
        relay = RelayRecognizer(sent.append, maxsize=3)
        session = RecognitionSession(relay, on_result=lambda t, f: results.append((t, f)), settings=settings)
        session.start()
        fed = [relay.feed(e) for e in (StartEvent(), interim("we"), interim("we are"), EndEvent(), interim("late"))]
        relay.close()
        await relay.run()
        return relay, session, fed

    relay, session, fed = asyncio.run(scenario())
    # only the interim batch beyond the bound is dropped; the end still arrives
    assert fed == [True, True, True, True, False]
    assert results == [("we", False), ("we are", False)]
    assert [m["action"] for m in sent] == ["start", "start"]
    assert not session.is_listening
    assert not relay.running
    assert session.status is SessionStatus.STARTING


def test_full_queue_keeps_final_results():
    relay = RelayRecognizer(lambda payload: None, maxsize=1)
    assert relay.feed(interim("a"))
    assert not relay.feed(interim("ab"))
    final = ResultEvent(results=[RecognitionResult([RecognitionAlternative("abc")], is_final=True)])
    assert relay.feed(final)
    assert relay.feed(ErrorEvent(error="network"))


def test_client_message_parsing():
    hello = client_message_adapter.validate_json('{"type": "hello", "speech_recognition": false}')
    assert isinstance(hello, HelloMessage)
    assert hello.lang is None

    control = client_message_adapter.validate_python({"type": "control", "action": "reset"})
    assert isinstance(control, ControlMessage)

    error = client_message_adapter.validate_python({"type": "recognizer", "event": "error", "error": "network"})
    assert error.to_event() == ErrorEvent(error="network")

    with pytest.raises(ValidationError):
        client_message_adapter.validate_python({"type": "slide", "index": -1})
    with pytest.raises(ValidationError):
        client_message_adapter.validate_python({"type": "control", "action": "dance"})
    with pytest.raises(ValidationError):
        client_message_adapter.validate_json("not json")


def test_result_message_to_event():
    msg = client_message_adapter.validate_python(
        {
            "type": "recognizer",
            "event": "result",
            "result_index": 1,
            "results": [
                {"is_final": True, "alternatives": [{"transcript": "old", "confidence": 0.9}]},
                {"is_final": False, "alternatives": [{"transcript": "new", "confidence": 0.4}]},
            ],
        }
    )
    event = msg.to_event()
    assert event.result_index == 1
    assert [r.transcript for r in event.results] == ["old", "new"]
    assert [r.is_final for r in event.results] == [True, False]
    assert event.results[1].alternatives[0].confidence == 0.4
