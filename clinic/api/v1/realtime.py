from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import asyncio
import logging

router = APIRouter(tags=["Real-time"])

logger = logging.getLogger(__name__)

@router.websocket("/ws")
async def slot_events(websocket: WebSocket):
    """Push slot_booked events to the client until it disconnects."""
    hub = websocket.app.state.hub
    # Subscribe before accepting so nothing published after the handshake is missed
    subscription = hub.subscribe()

    async def forward_events():
        while True:
            message = await subscription.queue.get()
            await websocket.send_json(message)

    async def wait_for_disconnect():
        # Clients never need to send; drain until the socket closes
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            return

    try:
        await websocket.accept()
        sender = asyncio.create_task(forward_events())
        receiver = asyncio.create_task(wait_for_disconnect())
        done, pending = await asyncio.wait(
            {sender, receiver}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for task in done:
            if task is sender and not task.cancelled() and task.exception():
                logger.info(f"Real-time client dropped: {task.exception()!r}")
    finally:
        hub.unsubscribe(subscription)
