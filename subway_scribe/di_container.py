from __future__ import annotations

from dataclasses import dataclass

import httpx
from openai import OpenAI

from subway_scribe.application.listening_controller import ListeningController
from subway_scribe.application.port.audio_platform import AudioPlatform
from subway_scribe.application.port.speech_transport import SpeechTransport
from subway_scribe.application.port.text_to_speech import AudioOutput, TextToSpeech
from subway_scribe.application.recording_session_manager import RecordingSessionManager
from subway_scribe.application.transcription_submitter import TranscriptionSubmitter
from subway_scribe.config import AppConfig
from subway_scribe.infrastructure.audio.player import Player
from subway_scribe.infrastructure.audio.recorder import SoundDeviceAudioPlatform
from subway_scribe.infrastructure.google.speech_transport import GoogleSpeechTransport
from subway_scribe.infrastructure.openai.text_to_speech import (
    TextToSpeech as OpenAITextToSpeech,
)
from subway_scribe.utils.logger import Logger


@dataclass(frozen=True)
class AppContainer:
    config: AppConfig
    logger: Logger
    platform: AudioPlatform
    transport: SpeechTransport
    recorder: RecordingSessionManager
    submitter: TranscriptionSubmitter
    tts: TextToSpeech | None
    audio_output: AudioOutput | None
    controller: ListeningController


def build_container(
    config: AppConfig,
    *,
    logger: Logger | None = None,
    platform: AudioPlatform | None = None,
    transport: SpeechTransport | None = None,
    tts: TextToSpeech | None = None,
    audio_output: AudioOutput | None = None,
) -> AppContainer:
    logger = logger or Logger()

    player: Player | None = None
    if platform is None or audio_output is None:
        player = Player()

    platform = platform or SoundDeviceAudioPlatform(
        sample_rate=config.recorder.sample_rate,
        channels=config.recorder.channels,
        recordings_dir=config.recorder.recordings_dir,
        player=player,
    )
    audio_output = audio_output or player

    if transport is None:
        http_client = httpx.Client(timeout=config.speech.timeout_seconds)
        transport = GoogleSpeechTransport(
            client=http_client,
            endpoint=config.speech.endpoint,
        )

    if tts is None and config.openai is not None:
        openai_client = OpenAI(
            api_key=config.openai.api_key,
            base_url=config.openai.base_url,
        )
        tts = OpenAITextToSpeech(
            client=openai_client,
            model=config.openai.tts_model,
            voice=config.openai.tts_voice,
        )
    if tts is None:
        logger.log("[TTS] OPENAI_API_KEY not set; transcript playback is disabled.")

    recorder = RecordingSessionManager(platform=platform, logger=logger)
    submitter = TranscriptionSubmitter(
        config=config.speech,
        transport=transport,
        platform=platform,
        logger=logger,
    )
    controller = ListeningController(
        recorder=recorder,
        submitter=submitter,
        logger=logger,
        tts=tts,
        audio_output=audio_output,
    )

    return AppContainer(
        config=config,
        logger=logger,
        platform=platform,
        transport=transport,
        recorder=recorder,
        submitter=submitter,
        tts=tts,
        audio_output=audio_output,
        controller=controller,
    )
