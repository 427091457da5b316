import logging
from typing import Any, Dict, List, Optional

from extraction.materializer import materialize
from extraction.task_extractor import TaskExtractor
from mindstream.errors import MindStreamError, PersistenceError, TaskNotFound
from mindstream.models import SubTask, Task
from speech.audio import AudioPayload
from speech.providers.local_provider import LocalRecognizer
from speech.transcriber import Transcriber
from storage.credentials import CredentialResolver
from storage.settings_store import SettingsStore
from storage.task_store import InMemoryTaskStore, TaskStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"title", "category", "estimated_time", "subtasks"}


class BackendAPI:
    """Central orchestration: transcribe -> structure -> materialize -> persist.

    Stages run strictly one after another; any failure stops the pipeline.
    """

    def __init__(
        self,
        settings_store: Optional[SettingsStore] = None,
        task_store: Optional[TaskStore] = None,
        local_recognizer: Optional[LocalRecognizer] = None,
    ):
        self.settings_store = settings_store or SettingsStore()
        self.credentials = CredentialResolver(self.settings_store)
        self.task_store = task_store or InMemoryTaskStore()
        self.extractor = TaskExtractor(self.settings_store, self.credentials)
        self.transcriber = Transcriber(self.settings_store, self.credentials, local_recognizer)

    def transcribe_audio(self, audio: AudioPayload, user_id: str) -> str:
        return self.transcriber.transcribe(audio, user_id)

    def structure_text(self, text: str, user_id: str) -> Dict[str, Any]:
        return self.extractor.structurize_text(text, user_id)

    async def save_tasks(self, payload: Dict[str, Any], user_id: str) -> List[Task]:
        """One insert per task; earlier inserts stay if a later one fails."""
        tasks = materialize(payload)
        saved: List[Task] = []
        for task in tasks:
            try:
                saved.append(await self.task_store.insert(task, user_id))
            except MindStreamError:
                raise
            except Exception as e:
                logger.error(f"Saving task {task.id} failed after {len(saved)} saved: {e}")
                raise PersistenceError(str(e), saved_count=len(saved)) from e
        logger.info(f"Saved {len(saved)} task(s) for user {user_id}")
        return saved

    async def list_tasks(self, user_id: str) -> List[Task]:
        return await self.task_store.list_for_user(user_id)

    async def _require(self, task_id: str, user_id: str) -> Task:
        task = await self.task_store.get(task_id, user_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    async def update_task(self, task_id: str, user_id: str, updates: Dict[str, Any]) -> Task:
        """Edit task fields. ``completed`` is always derived from the subtasks."""
        task = await self._require(task_id, user_id)
        for name, value in updates.items():
            if name not in EDITABLE_FIELDS or value is None:
                continue
            if name == "subtasks":
                task.replace_subtasks([st if isinstance(st, SubTask) else SubTask(**st) for st in value])
            else:
                setattr(task, name, value)
        return await self.task_store.save(task, user_id)

    async def toggle_subtask(self, task_id: str, subtask_id: str, user_id: str) -> Task:
        task = await self._require(task_id, user_id)
        try:
            task.toggle_subtask(subtask_id)
        except KeyError:
            raise TaskNotFound(f"{task_id}/{subtask_id}") from None
        return await self.task_store.save(task, user_id)

    async def delete_task(self, task_id: str, user_id: str) -> None:
        await self.task_store.delete(task_id, user_id)
