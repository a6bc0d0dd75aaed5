"""
Enumerated setting choices.

Each enum's ``value`` is the string written to the durable store, so
renaming a member is safe but changing a value is a settings migration.
"""
from enum import Enum


class SettingsTab(Enum):
    GENERAL = "general"
    NOTCH = "notch"
    WIDGETS = "widgets"
    FILE_TRAY = "file_tray"
    MESSAGES = "messages"
    DISPLAY = "display"
    ANIMATIONS = "animations"
    UPDATES = "updates"


class AIProvider(Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


class OpenAIModel(Enum):
    GPT_3_5 = "gpt-3.5-turbo"
    GPT_4 = "gpt-4"
    GPT_4O = "gpt-4o"


class AnthropicModel(Enum):
    CLAUDE_INSTANT = "claude-instant"
    CLAUDE_2 = "claude-2"
    CLAUDE_3_HAIKU = "claude-3-haiku"


class GoogleModel(Enum):
    PALM = "palm"
    GEMINI_PRO = "gemini-pro"


class HoverTarget(Enum):
    """Which region of the panel reacts to hover."""
    ALBUM = "album"
    PANEL = "panel"
    NONE = "none"


class TouchAction(Enum):
    """Action bound to a trackpad gesture over the panel."""
    NONE = "none"
    OPEN_FILE_TRAY = "open_file_tray"
    OPEN_SETTINGS = "open_settings"
    TOGGLE_PANEL = "toggle_panel"
    PLAY_PAUSE = "play_pause"


class MusicController(Enum):
    MEDIA_REMOTE = "media_remote"
    SPOTIFY = "spotify"
    APPLE_MUSIC = "apple_music"


class MusicProvider(Enum):
    NONE = "none"
    SPOTIFY = "spotify"
    APPLE_MUSIC = "apple_music"


class CameraQuality(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    PHOTO = "photo"


class ShaderOption(Enum):
    """Background animation rendered behind the expanded panel."""
    NONE = "none"
    AMBIENT_GRADIENT = "ambient_gradient"
    DIGITAL_RAIN = "digital_rain"
    GLOW = "glow"
