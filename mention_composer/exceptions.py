"""Exception hierarchy for mention-composer."""


class MentionComposerError(Exception):
    """Base exception for all mention-composer errors."""


class SuggestionSourceError(MentionComposerError):
    """A suggestion source could not complete a search (transport or payload error)."""


class KnownUsersError(MentionComposerError):
    """Known-users snapshot could not be loaded (missing file, invalid format)."""


class SettingsError(MentionComposerError):
    """Settings file exists but could not be parsed or validated."""
