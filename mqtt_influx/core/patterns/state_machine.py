from enum import Enum, auto
from typing import Dict, List

class BridgeState(Enum):
    CONNECTING  = auto()
    CONNECTED   = auto()
    TERMINATED  = auto()

class StateMachine:
    def __init__(self, initial: BridgeState = BridgeState.CONNECTING):
        self._state = initial
        self._trans: Dict[BridgeState, List[BridgeState]] = {
            BridgeState.CONNECTING: [BridgeState.CONNECTED, BridgeState.TERMINATED],
            BridgeState.CONNECTED:  [BridgeState.TERMINATED],
            BridgeState.TERMINATED: [],
        }

    @property
    def state(self) -> BridgeState: return self._state

    @property
    def running(self) -> bool: return self._state is not BridgeState.TERMINATED

    def can(self, nxt: BridgeState) -> bool: return nxt in self._trans[self._state]

    def transition(self, nxt: BridgeState) -> bool:
        if self.can(nxt):
            self._state = nxt
            return True
        return False
