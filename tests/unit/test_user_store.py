"""Unit tests for the user store."""

import asyncio

import pytest

from tagstore.errors import Conflict, NotFound, Unauthorized, WrongPassword
from tagstore.kernel.identity.token import SessionToken
from tagstore.kernel.identity.user_store import UserStore


class TestUserStore:
    """Tests for UserStore."""
    
    @pytest.mark.asyncio
    async def test_register_then_is_taken(self, user_store: UserStore):
        assert await user_store.is_taken("ash") is False
        
        user = await user_store.register("ash", "pikachu")
        
        assert user.id is not None
        assert await user_store.is_taken("ash") is True
    
    @pytest.mark.asyncio
    async def test_username_match_is_case_sensitive(self, user_store: UserStore):
        await user_store.register("ash", "pikachu")
        
        assert await user_store.is_taken("Ash") is False
    
    @pytest.mark.asyncio
    async def test_second_register_conflicts(self, user_store: UserStore):
        await user_store.register("ash", "pikachu")
        
        with pytest.raises(Conflict):
            await user_store.register("ash", "other")
    
    @pytest.mark.asyncio
    async def test_concurrent_registers_keep_username_unique(self, session_maker, locks):
        async with session_maker() as a, session_maker() as b:
            results = await asyncio.gather(
                UserStore(a, locks).register("misty", "staryu"),
                UserStore(b, locks).register("misty", "psyduck"),
                return_exceptions=True,
            )
            
            conflicts = [r for r in results if isinstance(r, Conflict)]
            assert len(conflicts) == 1
            assert len(await UserStore(a, locks).list_users()) == 1
    
    @pytest.mark.asyncio
    async def test_authenticate(self, user_store: UserStore):
        registered = await user_store.register("ash", "pikachu")
        
        user = await user_store.authenticate("ash", "pikachu")
        
        assert user.id == registered.id
    
    @pytest.mark.asyncio
    async def test_authenticate_unknown_user(self, user_store: UserStore):
        with pytest.raises(NotFound):
            await user_store.authenticate("gary", "eevee")
    
    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, user_store: UserStore):
        await user_store.register("ash", "pikachu")
        
        with pytest.raises(WrongPassword) as exc_info:
            await user_store.authenticate("ash", "raichu")
        assert isinstance(exc_info.value, Unauthorized)
    
    @pytest.mark.asyncio
    async def test_token_hash_round_trip(self, user_store: UserStore):
        user = await user_store.register("ash", "pikachu")
        assert await user_store.get_token_hash(user.id) is None
        
        await user_store.set_token(user.id, SessionToken(user_id=user.id, issued_at=5, hash="ab" * 32))
        
        assert await user_store.get_token_hash(user.id) == "ab" * 32
        assert (await user_store.get(user.id)).token_issued_at == 5
    
    @pytest.mark.asyncio
    async def test_set_token_updates_loaded_user(self, user_store: UserStore):
        user = await user_store.register("ash", "pikachu")
        
        await user_store.set_token(user.id, SessionToken(user_id=user.id, issued_at=7, hash="cd" * 32))
        
        assert user.token_hash == "cd" * 32
        assert user.token_issued_at == 7
    
    @pytest.mark.asyncio
    async def test_set_token_unknown_user(self, user_store: UserStore):
        with pytest.raises(NotFound):
            await user_store.set_token(12345, SessionToken(user_id=12345, issued_at=7, hash="cd" * 32))
    
    @pytest.mark.asyncio
    async def test_get_token_hash_unknown_user(self, user_store: UserStore):
        assert await user_store.get_token_hash(12345) is None
    
    @pytest.mark.asyncio
    async def test_list_users_in_registration_order(self, user_store: UserStore):
        for name in ("ash", "misty", "brock"):
            await user_store.register(name, "pw")
        
        users = await user_store.list_users()
        
        assert [u.username for u in users] == ["ash", "misty", "brock"]
