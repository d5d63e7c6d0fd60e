"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Value object validation
    EMPTY_STREAM_HANDLE = "Stream handle cannot be empty"
    INVALID_GAIN = "Gain must be between 0 and 1"

    # Skip input validation
    INVALID_SKIP_RANGE = "Skip range must look like `3` or `2-5`"
    INVERTED_SKIP_RANGE = "Skip range start must not be greater than its end"
    UNKNOWN_QUEUE_FLAG = "Unknown queue flag: {flag}"

    # Resolution
    RESOLVER_RETURNED_NOTHING = "No media information returned"
    NO_STREAM_URL = "No playable audio stream found"
    LOCAL_TRACK_NOT_FOUND = "Track '{name}' not found"
    LOCAL_TRACK_OUTSIDE_DIR = "Track name must not leave the tracks directory"

    # Voice transport
    VOICE_JOIN_TIMEOUT = "Failed to join voice channel after {seconds:g} seconds"
    VOICE_NOT_A_VOICE_CHANNEL = "Channel {channel_id} is not a voice channel"
    VOICE_GUILD_NOT_FOUND = "Guild {guild_id} is not available"

    # Settings
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Bootstrap
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as
    parameters so formatting is deferred to the logging framework.
    """

    # Session lifecycle
    SESSION_CREATED = "Created playback session for guild %s"
    SESSION_DESTROYED = "Destroyed playback session for guild %s"
    SESSION_REPLACED = "Replacing existing playback session for guild %s"
    SESSION_TORN_DOWN_ON_DISCONNECT = "Voice connection lost in guild %s, tearing down session"
    SESSIONS_CLOSED = "Closed %d playback session(s)"

    # Gateway and guild events
    GATEWAY_CONNECTED = "WebSocket connected"
    GATEWAY_DISCONNECTED = "WebSocket disconnected"
    GATEWAY_RESUMED = "WebSocket session resumed"
    GUILD_JOINED = "Joined guild: %s (%s)"
    GUILD_LEFT = "Left guild: %s (%s)"

    # Queue
    QUEUE_ENQUEUED = "Queued '%s' at position %d in guild %s"
    QUEUE_ENQUEUED_FRONT = "Queued '%s' to play now in guild %s"
    QUEUE_ENQUEUED_MANY = "Queued %d track(s) (front=%s) in guild %s"
    QUEUE_RANGE_REMOVED = "Removed %d track(s) at positions %d-%d in guild %s"
    QUEUE_STOPPED = "Cleared %d queued track(s) and stopped playback in guild %s"
    QUEUE_FLAG_CHANGED = "Set %s=%s in guild %s (changed=%s)"
    QUEUE_EXHAUSTED = "Nothing left to play in guild %s"

    # Play requests
    PLAY_LOOKUP_FAILED = "Lookup failed for %r in guild %s: %s"

    # Advance cycle
    ADVANCE_BUSY = "Advance already in progress in guild %s"
    ADVANCE_REPLAYING = "Replaying '%s' in guild %s"
    ADVANCE_RESOLVING = "Resolving '%s' for guild %s"
    ADVANCE_PLAYING = "Playing audio resource '%s' in guild %s"
    ADVANCE_FAILED = "Could not play '%s' in guild %s, trying next track: %s"
    ADVANCE_DROPPED_AFTER_STOP = "Dropping '%s' in guild %s, playback was stopped while it resolved"
    SKIP_REQUESTED = "Skip requested in guild %s (dropping %d extra track(s))"
    CALLBACK_FAILED = "Track callback %s raised for '%s'"

    # Sink
    SINK_TRANSITION = "Sink in guild %s: %s -> %s"
    SINK_PLAYBACK_ERROR = "Playback error in guild %s: %s"
    SINK_LISTENER_FAILED = "Sink listener raised in guild %s"

    # Voice
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s after %ss"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_CLEANUP_ERROR = "Error during voice cleanup in guild %s"

    # Resolver
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info for %s"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist %s"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    CACHE_HIT_URL = "Info cache hit for %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired info cache entries"
    LOCAL_TRACK_RESOLVED = "Resolved local track %s"

    # Presets
    PRESETS_LOADED = "Loaded %d ambient preset(s) from %s"
    PRESETS_FILE_INVALID = "Could not load presets from %s, using built-in presets"

    # Bot lifecycle
    BOT_STARTING = "Starting Soundsmith %s (%s)"
    LOGGING_CONFIG_FALLBACK = "Could not load %s (%s), using console logging"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_READY = "Bot ready as %s (ID: %s), %d live session(s)"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %d succeeded, %d failed"
    BOT_SYNCED_GUILD = "Synced %d command(s) to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync commands to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %d global command(s)"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync global commands: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_SLASH_COMMAND_ERROR = "Slash command error in /%s: %s"
    BOT_SLASH_COMMAND_REJECTED = "Slash command /%s rejected: %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    NOTIFY_FAILED = "Failed to notify requester in channel %s"


class DiscordUIMessages:
    """User-facing strings sent back through Discord."""

    # Guards
    STATE_SERVER_ONLY = "This command only works in a server."
    STATE_VERIFY_VOICE_FAILED = "Could not verify your voice state."
    STATE_NEED_TO_BE_IN_VOICE = "You must be in a voice channel first!"
    STATE_NOT_PLAYING_IN_SERVER = "Not playing in this server!"

    # Play
    ACTION_ENQUEUED = "Enqueued **{title}**"
    ACTION_PLAYING_NOW = "Playing **{title}** now"
    ACTION_ENQUEUED_MANY = "Enqueued **{count}** track(s)"
    ACTION_AMBIENT_ENQUEUED = "Enqueued ambient preset **{name}**"
    ERROR_COULD_NOT_PLAY = (
        "Could not play. Please verify the link is correct, or try again later."
    )
    ERROR_PLAYLIST_EMPTY = "No playable tracks were found in that playlist."
    ERROR_JOIN_FAILED = "Failed to join voice channel. Please try again later."
    ERROR_JOIN_TIMEOUT = (
        "Failed to join voice channel after {seconds:g} seconds. Please try again later."
    )

    # Track lifecycle notifications
    NOTIFY_PLAYING = "Playing **{title}**!"
    NOTIFY_FINISHED = "Finished **{title}**!"
    NOTIFY_ERROR = "Error playing **{title}**: {error}"

    # Skip / stop
    ACTION_SKIPPED = "Skipped song!"
    ACTION_SKIPPED_COUNT = "Skipped {count} song(s)!"
    ACTION_SKIP_RANGE = "Removed {count} track(s) from the queue."
    STATE_SKIP_RANGE_NOTHING = "No queued tracks in that range."
    ACTION_STOPPED = "Stopped playback and cleared the queue."
    STATE_NOTHING_TO_STOP = "Nothing to stop."
    STATE_NOTHING_TO_SKIP = "Nothing to skip."

    # Pause / resume / leave
    ACTION_PAUSED = "Paused!"
    ACTION_UNPAUSED = "Unpaused!"
    STATE_NOTHING_TO_PAUSE = "Nothing is playing."
    STATE_NOT_PAUSED = "Playback is not paused."
    ACTION_LEFT = "Left channel!"

    # Flags
    ACTION_FLAG_SET = "{emoji} {flag} is now **{state}**."
    STATE_FLAG_UNCHANGED = "{flag} was already **{state}**."

    # Queue listing
    QUEUE_NOTHING_PLAYING = "Nothing is currently playing!"
    QUEUE_NOW_PLAYING = "Playing **{title}**"
    QUEUE_EMPTY = "The queue is empty."
    QUEUE_MORE = "...and {count} more..."
    QUEUE_TOTAL = "Total queued: {duration}"
    QUEUE_FLAGS = "repeat: {repeat} | loop: {loop} | shuffle: {shuffle}"

    # Ambient presets
    PRESET_UNKNOWN = "Unknown preset `{name}`. Available: {available}"

    # Generic
    ERROR_OCCURRED = "❌ An error occurred: {error}"
