"""
Microsoft Planner task filing.

Plan creation is not supported (it requires creating a Microsoft 365 group),
so every assignee must already own at least one plan.
"""

from ..errors import TaskContainerNotFoundError
from ..models.task import TaskContainer, TaskRecord
from .graph_client import GraphClient

_ASSIGNMENT_TYPE = '#microsoft.graph.plannerAssignment'


class PlannerClient:
    """Reads plans and creates tasks in Microsoft Planner."""

    def __init__(self, graph: GraphClient):
        self.graph = graph

    async def get_user_plans(self, user_id: str) -> list[TaskContainer]:
        result = await self.graph.get(f"/users/{user_id}/planner/plans")
        return [
            TaskContainer(id=p['id'], title=p.get('title', ''), owner=p.get('owner'))
            for p in result.get('value') or []
        ]

    async def get_personal_plan(self, user_id: str, display_name: str) -> TaskContainer:
        """
        Find the plan to file a user's tasks into.

        Prefers a plan titled "{display_name}'s Tasks", then falls back to the
        user's first plan.

        Raises:
            TaskContainerNotFoundError: If the user has no plans
        """
        plans = await self.get_user_plans(user_id)
        personal_title = f"{display_name}'s Tasks"

        for plan in plans:
            if plan.title == personal_title:
                return plan

        if plans:
            return plans[0]

        raise TaskContainerNotFoundError(
            f"No Planner plans found for user {user_id}. "
            "Please create a plan in Microsoft Planner first.",
            context={'user_id': user_id, 'display_name': display_name},
        )

    async def create_task(
        self,
        plan_id: str,
        title: str,
        assignee_ids: list[str],
        due_date_time: str | None = None,
        description: str | None = None,
    ) -> TaskRecord:
        """
        Create a Planner task, then write its description.

        Args:
            plan_id: Target plan
            title: Task title
            assignee_ids: Directory IDs to assign, in order
            due_date_time: Optional ISO 8601 due date
            description: Optional task details text

        Returns:
            The created TaskRecord
        """
        task_data: dict = {
            'planId': plan_id,
            'title': title,
            'assignments': {
                user_id: {'@odata.type': _ASSIGNMENT_TYPE, 'orderHint': ' !'}
                for user_id in assignee_ids
            },
        }
        if due_date_time:
            task_data['dueDateTime'] = due_date_time

        created = await self.graph.post('/planner/tasks', json=task_data)
        record = TaskRecord.from_graph(created)

        if description and record.id:
            await self.update_task_details(record.id, description)

        return record

    async def update_task_details(self, task_id: str, description: str) -> None:
        """Set the task description, guarded by the details ETag."""
        path = f"/planner/tasks/{task_id}/details"
        details = await self.graph.get(path)

        await self.graph.patch(
            path,
            json={'description': description},
            headers={'If-Match': details.get('@odata.etag', '')},
        )
