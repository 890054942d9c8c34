from .state_machine import StateMachine, BridgeState

__all__ = ["StateMachine", "BridgeState"]
