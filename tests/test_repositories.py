"""
Тесты для Repository Layer (CRUD операции).

Проверяем:
- Create / Read / Update / Delete
- Фильтрацию и порядок задач
- Связи задача-тег (task_tags) и каскадное удаление
- Атомарный счётчик очков
"""

from datetime import datetime

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from taskquest.models import SCORE_AGGREGATE_ID, Tag, Task, TaskPriority, TaskStatus
from taskquest.repositories import (
    ScoreRepository,
    TagRepository,
    TaskRepository,
    TaskTagRepository,
)

# ============================================================================
# TASK REPOSITORY TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_task_create_defaults(test_db):
    """Test: создание задачи, значения по умолчанию."""
    repo = TaskRepository(test_db)

    created = await repo.create(Task(title="Test Task"))
    await test_db.commit()

    assert created.id is not None
    assert created.status == TaskStatus.PENDING
    assert created.priority == TaskPriority.MEDIUM
    assert created.due_date is None
    assert created.created_at is not None
    assert created.updated_at is not None


@pytest.mark.asyncio
async def test_task_get_by_id_full_loads_tags(test_db):
    """Test: get_by_id_full подтягивает теги, добавленные через task_tags."""
    task_repo = TaskRepository(test_db)
    tag_repo = TagRepository(test_db)
    link_repo = TaskTagRepository(test_db)

    task = await task_repo.create(Task(title="Tagged"))
    tag_b = await tag_repo.create(Tag(name="beta"))
    tag_a = await tag_repo.create(Tag(name="alpha"))
    await link_repo.add(task.id, tag_b.id)
    await link_repo.add(task.id, tag_a.id)
    await test_db.commit()

    found = await task_repo.get_by_id_full(task.id)

    assert found is not None
    assert [tag.name for tag in found.tags] == ["alpha", "beta"]


@pytest.mark.asyncio
async def test_task_get_by_id_not_found(test_db):
    """Test: несуществующая задача - None."""
    repo = TaskRepository(test_db)

    assert await repo.get_by_id(999) is None
    assert await repo.get_by_id_full(999) is None


@pytest.mark.asyncio
async def test_task_update(test_db):
    """Test: update меняет только переданные поля."""
    repo = TaskRepository(test_db)

    task = await repo.create(Task(title="Old", description="Keep me"))
    await test_db.commit()

    updated = await repo.update(task.id, title="New", status=TaskStatus.IN_PROGRESS)
    await test_db.commit()

    assert updated.title == "New"
    assert updated.description == "Keep me"
    assert updated.status == TaskStatus.IN_PROGRESS
    assert await repo.update(999, title="Nope") is None


@pytest.mark.asyncio
async def test_task_delete(test_db):
    """Test: удаление задачи."""
    repo = TaskRepository(test_db)

    task = await repo.create(Task(title="Doomed"))
    await test_db.commit()
    task_id = task.id

    assert await repo.delete(task_id) is True
    await test_db.commit()

    assert await repo.get_by_id(task_id) is None
    assert await repo.delete(task_id) is False


@pytest.mark.asyncio
async def test_task_get_filtered_newest_first(test_db):
    """Test: без фильтров - новые задачи первыми, limit соблюдается."""
    repo = TaskRepository(test_db)

    for i in range(5):
        await repo.create(Task(title=f"Task {i}"))
    await test_db.commit()

    tasks = await repo.get_filtered(limit=3)

    assert [task.title for task in tasks] == ["Task 4", "Task 3", "Task 2"]


@pytest.mark.asyncio
async def test_task_get_filtered_combines_conditions(test_db):
    """Test: фильтры статуса, приоритета и дедлайна комбинируются через AND."""
    repo = TaskRepository(test_db)

    await repo.create(
        Task(title="A", status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH)
    )
    await repo.create(Task(title="B", status=TaskStatus.COMPLETED, priority=TaskPriority.LOW))
    await repo.create(Task(title="C", status=TaskStatus.PENDING, priority=TaskPriority.HIGH))
    await test_db.commit()

    completed = await repo.get_filtered(status=TaskStatus.COMPLETED)
    high = await repo.get_filtered(priority=TaskPriority.HIGH)
    both = await repo.get_filtered(status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH)

    assert {task.title for task in completed} == {"A", "B"}
    assert {task.title for task in high} == {"A", "C"}
    assert [task.title for task in both] == ["A"]


@pytest.mark.asyncio
async def test_task_get_filtered_due_before_inclusive(test_db):
    """Test: due_before включает задачи с дедлайном ровно в эту дату."""
    repo = TaskRepository(test_db)

    await repo.create(Task(title="Early", due_date=datetime(2024, 1, 10)))
    await repo.create(Task(title="Exact", due_date=datetime(2024, 1, 15)))
    await repo.create(Task(title="Late", due_date=datetime(2024, 1, 20)))
    await repo.create(Task(title="No deadline"))
    await test_db.commit()

    tasks = await repo.get_filtered(due_before=datetime(2024, 1, 15))

    assert {task.title for task in tasks} == {"Early", "Exact"}


@pytest.mark.asyncio
async def test_task_enum_values_stored_as_strings(test_db):
    """Test: в БД хранится значение "in-progress", а не имя IN_PROGRESS."""
    repo = TaskRepository(test_db)

    task = await repo.create(Task(title="Working", status=TaskStatus.IN_PROGRESS))
    await test_db.commit()

    result = await test_db.execute(
        text("SELECT status FROM tasks WHERE id = :id"), {"id": task.id}
    )
    assert result.scalar_one() == "in-progress"


@pytest.mark.asyncio
async def test_task_has_tag(test_db):
    """Test: has_tag проверяет связь по имени тега."""
    task_repo = TaskRepository(test_db)
    tag_repo = TagRepository(test_db)
    link_repo = TaskTagRepository(test_db)

    task = await task_repo.create(Task(title="Tagged"))
    urgent = await tag_repo.create(Tag(name="urgent"))
    await tag_repo.create(Tag(name="later"))
    await link_repo.add(task.id, urgent.id)
    await test_db.commit()

    assert await task_repo.has_tag(task.id, "urgent") is True
    assert await task_repo.has_tag(task.id, "later") is False
    assert await task_repo.has_tag(task.id, "missing") is False


# ============================================================================
# TAG REPOSITORY TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_tag_get_by_name_is_case_sensitive(test_db):
    """Test: имена тегов не нормализуются."""
    repo = TagRepository(test_db)

    await repo.create(Tag(name="Urgent", color="#FF0000"))
    await test_db.commit()

    found = await repo.get_by_name("Urgent")
    assert found is not None
    assert found.color == "#FF0000"
    assert await repo.get_by_name("urgent") is None


@pytest.mark.asyncio
async def test_tag_get_or_create(test_db):
    """Test: get_or_create возвращает существующий тег, а не дубликат."""
    repo = TagRepository(test_db)

    first = await repo.get_or_create("home")
    await test_db.commit()
    second = await repo.get_or_create("home")

    assert first.id == second.id
    assert second.color is None
    assert await repo.count() == 1


@pytest.mark.asyncio
async def test_tag_get_all_ordered(test_db):
    """Test: теги отсортированы по имени."""
    repo = TagRepository(test_db)

    for name in ["work", "home", "errands"]:
        await repo.create(Tag(name=name))
    await test_db.commit()

    tags = await repo.get_all_ordered()

    assert [tag.name for tag in tags] == ["errands", "home", "work"]


@pytest.mark.asyncio
async def test_tag_unique_constraint(test_db):
    """Test: БД не пускает второй тег с тем же именем."""
    repo = TagRepository(test_db)

    await repo.create(Tag(name="dup"))
    await test_db.commit()

    with pytest.raises(IntegrityError):
        await repo.create(Tag(name="dup"))

    await test_db.rollback()


# ============================================================================
# TASK-TAG REPOSITORY TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_task_tag_add_if_missing(test_db):
    """Test: повторная привязка не создаёт вторую строку."""
    task = await TaskRepository(test_db).create(Task(title="T"))
    tag = await TagRepository(test_db).create(Tag(name="x"))
    repo = TaskTagRepository(test_db)

    assert await repo.add_if_missing(task.id, tag.id) is True
    assert await repo.add_if_missing(task.id, tag.id) is False
    await test_db.commit()

    assert await repo.get_tag_ids(task.id) == [tag.id]


@pytest.mark.asyncio
async def test_task_tag_remove(test_db):
    """Test: удаление связи, повторное удаление - no-op."""
    task = await TaskRepository(test_db).create(Task(title="T"))
    tag = await TagRepository(test_db).create(Tag(name="x"))
    repo = TaskTagRepository(test_db)
    await repo.add(task.id, tag.id)
    await test_db.commit()

    assert await repo.remove(task.id, tag.id) is True
    assert await repo.remove(task.id, tag.id) is False
    assert await repo.exists(task.id, tag.id) is False


@pytest.mark.asyncio
async def test_task_delete_cascades_to_task_tags(test_db):
    """Test: удаление задачи удаляет её связи, но не сами теги."""
    task_repo = TaskRepository(test_db)
    tag_repo = TagRepository(test_db)
    link_repo = TaskTagRepository(test_db)

    task = await task_repo.create(Task(title="T"))
    tag = await tag_repo.create(Tag(name="keep"))
    await link_repo.add(task.id, tag.id)
    await test_db.commit()
    task_id, tag_id = task.id, tag.id

    await task_repo.delete(task_id)
    await test_db.commit()

    assert await link_repo.get_tag_ids(task_id) == []
    assert await tag_repo.get_by_id(tag_id) is not None


@pytest.mark.asyncio
async def test_tag_delete_cascades_to_task_tags(test_db):
    """Test: удаление тега удаляет его связи, задача остаётся."""
    task_repo = TaskRepository(test_db)
    tag_repo = TagRepository(test_db)
    link_repo = TaskTagRepository(test_db)

    task = await task_repo.create(Task(title="T"))
    tag = await tag_repo.create(Tag(name="gone"))
    await link_repo.add(task.id, tag.id)
    await test_db.commit()
    task_id = task.id

    await tag_repo.delete(tag.id)
    await test_db.commit()

    assert await link_repo.get_tag_ids(task_id) == []
    found = await task_repo.get_by_id_full(task_id)
    assert found is not None
    assert found.tags == []


# ============================================================================
# SCORE REPOSITORY TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_score_get_or_create_starts_at_zero(test_db):
    """Test: счётчик создаётся лениво с total=0."""
    repo = ScoreRepository(test_db)

    assert await repo.count() == 0

    score = await repo.get_or_create()
    await test_db.commit()

    assert score.id == SCORE_AGGREGATE_ID
    assert score.total == 0
    assert await repo.count() == 1


@pytest.mark.asyncio
async def test_score_add_points_accumulates(test_db):
    """Test: add_points - атомарный инкремент, строка одна."""
    repo = ScoreRepository(test_db)

    assert await repo.add_points(5) == 5
    assert await repo.add_points(3) == 8
    await test_db.commit()

    score = await repo.get_or_create()
    assert score.total == 8
    assert await repo.count() == 1
