from pagesync.schemas import Participant


class SessionRegistry:
    """Live mapping of connection id -> participant.

    Operations on an unknown id are no-ops: frames that race a disconnect, or
    arrive before USER_JOIN, are dropped rather than treated as errors.
    """

    def __init__(self):
        self.participants: dict[str, Participant] = {}

    def put(self, participant_id: str, participant: Participant) -> None:
        self.participants[participant_id] = participant

    def get(self, participant_id: str) -> Participant | None:
        return self.participants.get(participant_id)

    def update_page(self, participant_id: str, page: int) -> bool:
        participant = self.participants.get(participant_id)
        if participant is None:
            return False
        participant.page = page
        return True

    def remove(self, participant_id: str) -> Participant | None:
        return self.participants.pop(participant_id, None)

    def all(self) -> list[Participant]:
        return list(self.participants.values())

    def clear(self) -> None:
        self.participants.clear()

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self.participants

    def __len__(self) -> int:
        return len(self.participants)
