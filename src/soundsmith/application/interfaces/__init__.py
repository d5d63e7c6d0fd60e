"""Port interfaces implemented by the infrastructure layer."""

from soundsmith.application.interfaces.audio_resolver import AudioResolver
from soundsmith.application.interfaces.audio_sink import AudioSink, SinkListener
from soundsmith.application.interfaces.voice_transport import VoiceTransport

__all__ = ["AudioResolver", "AudioSink", "SinkListener", "VoiceTransport"]
