"""
Repository implementation using SQLAlchemy ORM
"""

from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.exc import IntegrityError

from chess_daily.core.logger.logger import get_logger
from chess_daily.core.service.attempt.models import Attempt
from chess_daily.core.service.puzzle.models import DailyAssignment, Difficulty, Puzzle, SideToMove
from chess_daily.core.service.user.models import ProfileUpdate, SkillLevel, User
from chess_daily.infra.database import DatabaseManager
from chess_daily.infra.models import AttemptModel, DailyAssignmentModel, PuzzleModel, UserModel
from chess_daily.infra.repository.base import (
    AssignmentPredicate,
    AttemptPredicate,
    DuplicateAttemptError,
    PuzzlePredicate,
    Repository,
    UserPredicate,
)

logger = get_logger(__name__)


class SqlRepository(Repository):
    """Repository for puzzle service tables using SQLAlchemy ORM"""

    def __init__(self, session_factory: async_sessionmaker, database_manager: Optional[DatabaseManager] = None):
        self._session_factory = session_factory
        self._database_manager = database_manager

    @classmethod
    async def connect(cls, database_url: Optional[str] = None) -> "SqlRepository":
        """Open the database and build a repository on top of it"""
        manager = DatabaseManager(database_url)
        await manager.connect()
        return cls(manager.get_session_factory(), manager)

    async def close(self) -> None:
        if self._database_manager is not None:
            await self._database_manager.close()

    # Model <-> entity conversion

    def _puzzle_to_entity(self, model: PuzzleModel) -> Puzzle:
        return Puzzle(
            id=model.id,
            fen=model.fen,
            pgn=model.pgn or "",
            to_move=SideToMove(model.to_move),
            difficulty=Difficulty(model.difficulty),
            themes=list(model.themes or []),
            solution=model.solution,
            rating=model.rating,
            popularity=model.popularity,
            success_percentage=model.success_percentage
        )

    def _user_to_entity(self, model: UserModel) -> User:
        return User(
            wallet_address=model.wallet_address,
            username=model.username,
            success_rate=model.success_rate,
            completed_puzzles=model.completed_puzzles,
            preferred_themes=list(model.preferred_themes or []),
            preferred_difficulty=Difficulty(model.preferred_difficulty),
            skill_level=SkillLevel(model.skill_level),
            last_recommendation_at=model.last_recommendation_at,
            created_at=model.created_at
        )

    def _attempt_to_entity(self, model: AttemptModel) -> Attempt:
        return Attempt(
            id=model.id,
            user_id=model.user_id,
            puzzle_id=model.puzzle_id,
            move=model.move,
            is_correct=model.is_correct,
            elapsed_seconds=model.elapsed_seconds,
            attempt_number=model.attempt_number,
            created_at=model.created_at,
            mint_reference=model.mint_reference
        )

    def _assignment_to_entity(self, model: DailyAssignmentModel) -> DailyAssignment:
        return DailyAssignment(
            epoch_day=model.epoch_day,
            puzzle_date=model.puzzle_date,
            puzzle_id=model.puzzle_id,
            created_at=model.created_at
        )

    # Puzzles

    async def get_puzzle(self, puzzle_id: int) -> Optional[Puzzle]:
        async with self._session_factory() as session:
            model = await session.get(PuzzleModel, puzzle_id)
            return self._puzzle_to_entity(model) if model else None

    async def put_puzzle(self, puzzle: Puzzle) -> Puzzle:
        values = dict(
            fen=puzzle.fen,
            pgn=puzzle.pgn,
            to_move=puzzle.to_move.value,
            difficulty=puzzle.difficulty.value,
            themes=list(puzzle.themes),
            solution=puzzle.solution,
            rating=puzzle.rating,
            popularity=puzzle.popularity,
            success_percentage=puzzle.success_percentage
        )
        async with self._session_factory() as session:
            if puzzle.id is None:
                model = PuzzleModel(**values)
                session.add(model)
            else:
                model = await session.merge(PuzzleModel(id=puzzle.id, **values))
            await session.commit()
            return self._puzzle_to_entity(model)

    async def scan_puzzles(self, predicate: Optional[PuzzlePredicate] = None) -> List[Puzzle]:
        async with self._session_factory() as session:
            result = await session.execute(select(PuzzleModel).order_by(PuzzleModel.id))
            puzzles = [self._puzzle_to_entity(model) for model in result.scalars().all()]
        return [puzzle for puzzle in puzzles if predicate is None or predicate(puzzle)]

    async def get_puzzles_by_difficulty(self, difficulty: str) -> List[Puzzle]:
        try:
            tier = Difficulty(difficulty)
        except ValueError:
            return []
        async with self._session_factory() as session:
            stmt = (
                select(PuzzleModel)
                .where(PuzzleModel.difficulty == tier.value)
                .order_by(PuzzleModel.id)
            )
            result = await session.execute(stmt)
            return [self._puzzle_to_entity(model) for model in result.scalars().all()]

    # Users

    async def get_user(self, wallet_address: str) -> Optional[User]:
        async with self._session_factory() as session:
            stmt = select(UserModel).where(UserModel.wallet_address == wallet_address)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return self._user_to_entity(model) if model else None

    async def put_user(self, user: User) -> User:
        values = dict(
            username=user.username,
            success_rate=user.success_rate,
            completed_puzzles=user.completed_puzzles,
            preferred_themes=list(user.preferred_themes),
            preferred_difficulty=user.preferred_difficulty.value,
            skill_level=user.skill_level.value,
            last_recommendation_at=user.last_recommendation_at
        )
        try:
            await self._upsert_user(user, values)
        except IntegrityError as e:
            # Another request created the same wallet concurrently; apply as update
            logger.warning(
                f"User already exists (race condition): {e}",
                extra={"wallet_address": user.wallet_address}
            )
            await self._upsert_user(user, values)
        return user

    async def _upsert_user(self, user: User, values: dict) -> None:
        async with self._session_factory() as session:
            stmt = select(UserModel).where(UserModel.wallet_address == user.wallet_address)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                session.add(UserModel(
                    wallet_address=user.wallet_address,
                    created_at=user.created_at,
                    **values
                ))
            else:
                for key, value in values.items():
                    setattr(model, key, value)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise

    async def insert_user_if_absent(self, user: User) -> User:
        stored = await self.get_user(user.wallet_address)
        if stored is not None:
            return stored

        async with self._session_factory() as session:
            session.add(UserModel(
                wallet_address=user.wallet_address,
                username=user.username,
                success_rate=user.success_rate,
                completed_puzzles=user.completed_puzzles,
                preferred_themes=list(user.preferred_themes),
                preferred_difficulty=user.preferred_difficulty.value,
                skill_level=user.skill_level.value,
                last_recommendation_at=user.last_recommendation_at,
                created_at=user.created_at
            ))
            try:
                await session.commit()
                return user
            except IntegrityError:
                await session.rollback()
                logger.info(
                    "User created concurrently, keeping stored record",
                    extra={"wallet_address": user.wallet_address}
                )

        stored = await self.get_user(user.wallet_address)
        if stored is None:
            raise RuntimeError(f"User {user.wallet_address} vanished after conflict")
        return stored

    async def set_username(self, wallet_address: str, username: str) -> Optional[User]:
        return await self._patch_user(wallet_address, {"username": username})

    async def update_user_profile(self, wallet_address: str, profile: ProfileUpdate) -> Optional[User]:
        return await self._patch_user(wallet_address, dict(
            success_rate=profile.success_rate,
            completed_puzzles=profile.completed_puzzles,
            preferred_themes=list(profile.preferred_themes),
            preferred_difficulty=profile.preferred_difficulty.value,
            skill_level=profile.skill_level.value,
            last_recommendation_at=profile.last_recommendation_at
        ))

    async def _patch_user(self, wallet_address: str, values: dict) -> Optional[User]:
        async with self._session_factory() as session:
            stmt = update(UserModel).where(UserModel.wallet_address == wallet_address).values(**values)
            result = await session.execute(stmt)
            await session.commit()
            if result.rowcount == 0:
                return None
        return await self.get_user(wallet_address)

    async def scan_users(self, predicate: Optional[UserPredicate] = None) -> List[User]:
        async with self._session_factory() as session:
            result = await session.execute(select(UserModel).order_by(UserModel.id))
            users = [self._user_to_entity(model) for model in result.scalars().all()]
        return [user for user in users if predicate is None or predicate(user)]

    # Attempts

    async def get_attempt(self, attempt_id: int) -> Optional[Attempt]:
        async with self._session_factory() as session:
            model = await session.get(AttemptModel, attempt_id)
            return self._attempt_to_entity(model) if model else None

    async def put_attempt(self, attempt: Attempt) -> Attempt:
        async with self._session_factory() as session:
            if attempt.id is None:
                model = AttemptModel(
                    user_id=attempt.user_id,
                    puzzle_id=attempt.puzzle_id,
                    move=attempt.move,
                    is_correct=attempt.is_correct,
                    elapsed_seconds=attempt.elapsed_seconds,
                    attempt_number=attempt.attempt_number,
                    created_at=attempt.created_at,
                    mint_reference=attempt.mint_reference
                )
                session.add(model)
            else:
                model = await session.get(AttemptModel, attempt.id)
                if model is None:
                    raise ValueError(f"Attempt {attempt.id} does not exist")
                # Only the mint reference may change after creation
                model.mint_reference = attempt.mint_reference

            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateAttemptError(attempt.user_id, attempt.puzzle_id, attempt.attempt_number)

            return self._attempt_to_entity(model)

    async def scan_attempts(self, predicate: Optional[AttemptPredicate] = None) -> List[Attempt]:
        async with self._session_factory() as session:
            result = await session.execute(select(AttemptModel).order_by(AttemptModel.id))
            attempts = [self._attempt_to_entity(model) for model in result.scalars().all()]
        return [attempt for attempt in attempts if predicate is None or predicate(attempt)]

    async def list_attempts_for_pair(self, user_id: str, puzzle_id: int) -> List[Attempt]:
        async with self._session_factory() as session:
            stmt = (
                select(AttemptModel)
                .where(AttemptModel.user_id == user_id, AttemptModel.puzzle_id == puzzle_id)
                .order_by(AttemptModel.attempt_number)
            )
            result = await session.execute(stmt)
            return [self._attempt_to_entity(model) for model in result.scalars().all()]

    async def list_attempts_for_user(self, user_id: str) -> List[Attempt]:
        async with self._session_factory() as session:
            stmt = (
                select(AttemptModel)
                .where(AttemptModel.user_id == user_id)
                .order_by(AttemptModel.id)
            )
            result = await session.execute(stmt)
            return [self._attempt_to_entity(model) for model in result.scalars().all()]

    async def get_minted_attempts_for_user(self, user_id: str) -> List[Attempt]:
        async with self._session_factory() as session:
            stmt = (
                select(AttemptModel)
                .where(AttemptModel.user_id == user_id, AttemptModel.mint_reference.is_not(None))
                .order_by(AttemptModel.id)
            )
            result = await session.execute(stmt)
            return [self._attempt_to_entity(model) for model in result.scalars().all()]

    # Daily assignments

    async def get_daily_assignment(self, epoch_day: int) -> Optional[DailyAssignment]:
        async with self._session_factory() as session:
            model = await session.get(DailyAssignmentModel, epoch_day)
            return self._assignment_to_entity(model) if model else None

    async def put_daily_assignment(self, assignment: DailyAssignment) -> DailyAssignment:
        async with self._session_factory() as session:
            session.add(DailyAssignmentModel(
                epoch_day=assignment.epoch_day,
                puzzle_date=assignment.puzzle_date,
                puzzle_id=assignment.puzzle_id,
                created_at=assignment.created_at
            ))
            try:
                await session.commit()
                return assignment
            except IntegrityError:
                await session.rollback()
                logger.info(
                    "Daily assignment created concurrently, keeping stored binding",
                    extra={"epoch_day": assignment.epoch_day}
                )

        stored = await self.get_daily_assignment(assignment.epoch_day)
        if stored is None:
            raise RuntimeError(f"Daily assignment for day {assignment.epoch_day} vanished after conflict")
        return stored

    async def scan_daily_assignments(
        self, predicate: Optional[AssignmentPredicate] = None
    ) -> List[DailyAssignment]:
        async with self._session_factory() as session:
            result = await session.execute(select(DailyAssignmentModel).order_by(DailyAssignmentModel.epoch_day))
            assignments = [self._assignment_to_entity(model) for model in result.scalars().all()]
        return [item for item in assignments if predicate is None or predicate(item)]
