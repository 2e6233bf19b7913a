from score_sync.workers.frame_bridge import FrameLoopBridge, PendingCall

__all__ = ["FrameLoopBridge", "PendingCall"]
