"""Group CRUD and membership with row-level security."""

import logging

from app.core.exceptions import ConflictError, NotFoundError
from app.models import Group, GroupMembership
from app.schemas.groups import GroupCreate, GroupDetail, GroupMember, GroupOut, GroupUpdate
from app.services.policy import ensure_group_read, ensure_staff, resolve_actor
from app.services.store import Store

logger = logging.getLogger(__name__)


class GroupsService:
    """
    Staff manage groups and membership. Non-staff users can only read the
    groups they belong to, along with those groups' member lists.
    """

    def __init__(self, store: Store) -> None:
        self.store = store

    def _get_or_404(self, group_id: int) -> Group:
        group = self.store.get_group(group_id)
        if group is None:
            raise NotFoundError("Group not found")
        return group

    def _check_name_free(self, name: str) -> None:
        if self.store.find_group_by_name(name) is not None:
            raise ConflictError("A group with this name already exists")

    def create(self, data: GroupCreate, requester_id: int) -> GroupOut:
        actor = resolve_actor(self.store, requester_id)
        ensure_staff(actor, "create groups")
        self._check_name_free(data.name)

        group = Group(name=data.name, description=data.description)
        self.store.add(group)
        self.store.commit("A group with this name already exists")
        self.store.refresh(group)
        logger.info("Group created", extra={"group_id": group.id, "requester_id": requester_id})
        return self.store.group_view(group)

    def find_all(self, requester_id: int) -> list[GroupOut]:
        """Staff get every group; others only the groups they are a member of."""
        actor = resolve_actor(self.store, requester_id)
        if actor.is_staff:
            groups = self.store.list_groups()
        else:
            groups = self.store.list_groups_for_user(actor.user_id)
        return [self.store.group_view(g) for g in groups]

    def get(self, group_id: int, requester_id: int) -> GroupDetail:
        actor = resolve_actor(self.store, requester_id)
        ensure_group_read(self.store, actor, group_id)
        group = self._get_or_404(group_id)
        members = [self.store.group_member(m) for m in self.store.list_memberships(group.id)]
        return GroupDetail(**self.store.group_view(group).model_dump(), members=members)

    def update(self, group_id: int, data: GroupUpdate, requester_id: int) -> GroupOut:
        actor = resolve_actor(self.store, requester_id)
        ensure_staff(actor, "update groups")
        group = self._get_or_404(group_id)
        if data.name is not None and data.name != group.name:
            self._check_name_free(data.name)

        if data.name is not None:
            group.name = data.name
        if data.description is not None:
            group.description = data.description
        self.store.commit("A group with this name already exists")
        self.store.refresh(group)
        return self.store.group_view(group)

    def delete(self, group_id: int, requester_id: int) -> str:
        actor = resolve_actor(self.store, requester_id)
        ensure_staff(actor, "delete groups")
        group = self._get_or_404(group_id)
        name = group.name
        self.store.delete(group)
        self.store.commit()
        logger.info("Group deleted", extra={"group_id": group_id, "requester_id": requester_id})
        return f'Group "{name}" removed'

    def add_member(self, group_id: int, user_id: int, requester_id: int) -> str:
        actor = resolve_actor(self.store, requester_id)
        ensure_staff(actor, "add users to groups")
        group = self._get_or_404(group_id)
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if self.store.is_member(user.id, group.id):
            raise ConflictError("User is already in this group")

        self.store.add(GroupMembership(user_id=user.id, group_id=group.id))
        self.store.commit("User is already in this group")
        logger.info(
            "Group member added",
            extra={"group_id": group.id, "user_id": user.id, "requester_id": requester_id},
        )
        return f'User "{user.name}" added to group "{group.name}"'

    def remove_member(self, group_id: int, user_id: int, requester_id: int) -> str:
        actor = resolve_actor(self.store, requester_id)
        ensure_staff(actor, "remove users from groups")
        group = self._get_or_404(group_id)
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        membership = self.store.get_membership(user.id, group.id)
        if membership is None:
            raise NotFoundError("User is not in this group")

        message = f'User "{user.name}" removed from group "{group.name}"'
        self.store.delete(membership)
        self.store.commit()
        logger.info(
            "Group member removed",
            extra={"group_id": group.id, "user_id": user.id, "requester_id": requester_id},
        )
        return message

    def members(self, group_id: int, requester_id: int) -> list[GroupMember]:
        """Members in join order, each with their joined_at timestamp."""
        actor = resolve_actor(self.store, requester_id)
        ensure_group_read(self.store, actor, group_id, what="group's members")
        group = self._get_or_404(group_id)
        return [self.store.group_member(m) for m in self.store.list_memberships(group.id)]
