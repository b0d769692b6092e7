"""
Инструменты TaskQuest.

Каждый обработчик: аргументы → сервис → текст ответа.
Бизнес-ошибки сервисов перехватывает ToolRegistry.call.
"""

import json
from collections.abc import Iterable

from pydantic import BaseModel

from ..services import RewardService, ScoreService, TagService, TaskService
from .envelope import ToolResult
from .registry import ToolContext, ToolRegistry
from .schemas import (
    CreateTagArgs,
    CreateTaskArgs,
    DeleteTaskArgs,
    FindNearbyRewardArgs,
    ListTasksArgs,
    NoArgs,
    PlaceOut,
    TagAssignmentArgs,
    TagOut,
    TaskOut,
    UpdateTaskArgs,
)

registry = ToolRegistry()


def _to_json(item: BaseModel) -> str:
    return item.model_dump_json(indent=2)


def _list_to_json(items: Iterable[BaseModel]) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items], indent=2, ensure_ascii=False)


# ============================================================================
# TASKS
# ============================================================================


@registry.tool(
    "create_task",
    CreateTaskArgs,
    "Create a new task. Status always starts as 'pending'; missing tags are created.",
)
async def create_task(ctx: ToolContext, args: CreateTaskArgs) -> ToolResult:
    task = await TaskService(ctx.db).create_task(
        title=args.title,
        description=args.description,
        priority=args.priority,
        due_date=args.due_date,
        tag_names=args.tag_names,
    )
    return ToolResult.ok(f"Task created successfully: {_to_json(TaskOut.model_validate(task))}")


@registry.tool(
    "list_tasks",
    ListTasksArgs,
    "List tasks, newest first, filtered by status, priority, tag and due date.",
)
async def list_tasks(ctx: ToolContext, args: ListTasksArgs) -> ToolResult:
    tasks = await TaskService(ctx.db).list_tasks(
        status=args.status,
        priority=args.priority,
        tag_name=args.tag_name,
        due_before=args.due_before,
        limit=args.limit,
    )
    items = [TaskOut.model_validate(task) for task in tasks]
    return ToolResult.ok(f"Found {len(items)} tasks:\n{_list_to_json(items)}")


@registry.tool(
    "update_task",
    UpdateTaskArgs,
    "Update a task. Completing a task awards points: low=1, medium=3, high=5.",
)
async def update_task(ctx: ToolContext, args: UpdateTaskArgs) -> ToolResult:
    task = await TaskService(ctx.db).update_task(
        task_id=args.id,
        title=args.title,
        description=args.description,
        status=args.status,
        priority=args.priority,
        due_date=args.due_date,
    )
    return ToolResult.ok(f"Task updated successfully: {_to_json(TaskOut.model_validate(task))}")


@registry.tool("delete_task", DeleteTaskArgs, "Delete a task and its tag assignments.")
async def delete_task(ctx: ToolContext, args: DeleteTaskArgs) -> ToolResult:
    await TaskService(ctx.db).delete_task(args.id)
    return ToolResult.ok(f"Task with ID {args.id} deleted successfully")


# ============================================================================
# TAGS
# ============================================================================


@registry.tool("create_tag", CreateTagArgs, "Create a tag with an optional #RRGGBB color.")
async def create_tag(ctx: ToolContext, args: CreateTagArgs) -> ToolResult:
    tag = await TagService(ctx.db).create_tag(args.name, args.color)
    return ToolResult.ok(f"Tag created successfully: {_to_json(TagOut.model_validate(tag))}")


@registry.tool("list_tags", NoArgs, "List all tags ordered by name.")
async def list_tags(ctx: ToolContext, args: NoArgs) -> ToolResult:
    tags = await TagService(ctx.db).list_tags()
    items = [TagOut.model_validate(tag) for tag in tags]
    return ToolResult.ok(f"Found {len(items)} tags:\n{_list_to_json(items)}")


@registry.tool(
    "assign_tag", TagAssignmentArgs, "Assign a tag to a task, creating the tag if needed."
)
async def assign_tag(ctx: ToolContext, args: TagAssignmentArgs) -> ToolResult:
    created = await TagService(ctx.db).assign_tag(args.task_id, args.tag_name)
    if not created:
        return ToolResult.ok(
            f"Tag '{args.tag_name}' is already assigned to task {args.task_id}"
        )
    return ToolResult.ok(f"Tag '{args.tag_name}' assigned to task {args.task_id} successfully")


@registry.tool("remove_tag", TagAssignmentArgs, "Remove a tag from a task.")
async def remove_tag(ctx: ToolContext, args: TagAssignmentArgs) -> ToolResult:
    await TagService(ctx.db).remove_tag(args.task_id, args.tag_name)
    return ToolResult.ok(f"Tag '{args.tag_name}' removed from task {args.task_id} successfully")


# ============================================================================
# SCORE & REWARD
# ============================================================================


@registry.tool("get_score", NoArgs, "Get the current total points.")
async def get_score(ctx: ToolContext, args: NoArgs) -> ToolResult:
    total = await ScoreService(ctx.db).get_score()
    return ToolResult.ok(f"Current total points: {total}")


@registry.tool(
    "find_nearby_reward",
    FindNearbyRewardArgs,
    "Find ice cream shops near an address. Unlocked at 10 points.",
)
async def find_nearby_reward(ctx: ToolContext, args: FindNearbyRewardArgs) -> ToolResult:
    places = await RewardService(ctx.db, ctx.geo_client).find_nearby(args.address)

    if not places:
        return ToolResult.ok(
            f'No ice cream shops found near "{args.address}". Try a different location!'
        )

    lines = [
        f"{index}. {place.name}\n   Address: {place.address}\n   Coordinates: {place.coordinates}"
        for index, place in enumerate(
            (PlaceOut.model_validate(p) for p in places), start=1
        )
    ]
    return ToolResult.ok(
        f'Found {len(places)} ice cream shops near "{args.address}":\n\n' + "\n\n".join(lines)
    )
