"""Exception hierarchy for packetjourney."""


class PacketJourneyError(Exception):
    """Base class for all packetjourney errors."""


class ChallengeValidationError(PacketJourneyError):
    """A challenge transition was attempted without its precondition."""


class QuestContentError(PacketJourneyError):
    """Quest content failed validation at load time."""

    def __init__(self, quest_id: str, message: str):
        self.quest_id = quest_id
        super().__init__(f"Quest {quest_id!r}: {message}")


class LayerLockedError(PacketJourneyError):
    """An outcome was recorded for a layer that is still locked."""


class IdentityError(PacketJourneyError):
    """Identity could not be resolved or changed."""


class AuthenticationError(IdentityError):
    """Login or registration was refused."""


class PersistenceError(PacketJourneyError):
    """Progress could not be written to or read from storage."""
