"""Tests for the seal resolver and collision guard against a stub store."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import pytest

from seal_registry.models.enums import IdentifierKind
from seal_registry.resolution import (
    AmbiguousMatches,
    CollisionRejected,
    ExactMatch,
    FormatRejected,
    Identifier,
    NoSealFound,
    SealResolver,
)

if TYPE_CHECKING:
    from conftest import MakePayload, StubRegistryStore


class TestExactResolution:
    async def test_complete_tag_matches_seal(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        seal = stub_store.add_seal(1, history=["obs-1", "obs-7"])
        stub_store.exact_tags["T100"] = seal

        outcome = await SealResolver(stub_store).validate(make_payload(tags=["T100"]))

        assert isinstance(outcome, ExactMatch)
        assert outcome.seal is seal
        assert outcome.observations == ["obs-1", "obs-7"]

    async def test_unregistered_tag_is_not_a_rejection(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        outcome = await SealResolver(stub_store).validate(make_payload(tags=["T404"]))

        assert isinstance(outcome, NoSealFound)
        assert outcome.message == "No seals with this tag number found."

    async def test_unregistered_mark_message(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        outcome = await SealResolver(stub_store).validate(make_payload(marks=["M9"]))

        assert isinstance(outcome, NoSealFound)
        assert outcome.message == "No seals with this mark found."

    async def test_mark_lookup_is_season_scoped(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_marks[("M9", 2020)] = stub_store.add_seal(3)

        in_season = await SealResolver(stub_store).validate(
            make_payload(marks=["M9"], date="2020-02-01")
        )
        next_season = await SealResolver(stub_store).validate(
            make_payload(marks=["M9"], date="2021-02-01")
        )

        assert isinstance(in_season, ExactMatch)
        assert isinstance(next_season, NoSealFound)

    async def test_tag_takes_precedence_over_mark(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        tag_seal = stub_store.add_seal(1)
        mark_seal = stub_store.add_seal(2)
        stub_store.exact_tags["T1"] = tag_seal
        stub_store.exact_marks[("M1", 2020)] = mark_seal

        outcome = await SealResolver(stub_store).validate(make_payload(tags=["T1"], marks=["M1"]))

        assert isinstance(outcome, ExactMatch)
        assert outcome.seal is tag_seal

    async def test_only_first_complete_tag_is_used(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_tags["T2"] = stub_store.add_seal(2)

        outcome = await SealResolver(stub_store).validate(make_payload(tags=["T1", "T2"]))

        assert isinstance(outcome, NoSealFound)
        assert outcome.identifier.value == "T1"

    async def test_complete_wins_over_partial(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.partial_tags["T*"] = [stub_store.add_seal(1)]

        outcome = await SealResolver(stub_store).validate(make_payload(tags=["T*"], marks=["M1"]))

        assert isinstance(outcome, NoSealFound)
        assert outcome.identifier.kind is IdentifierKind.MARK

    async def test_dry_run_is_idempotent(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_tags["T100"] = stub_store.add_seal(1)
        payload = make_payload(tags=["T100"])
        resolver = SealResolver(stub_store)

        first = await resolver.validate(payload)
        second = await resolver.validate(payload)

        assert first == second
        assert stub_store.writes == []


class TestPartialResolution:
    async def test_candidates_in_store_order(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        later = stub_store.add_seal(9, history=["obs-9"])
        earlier = stub_store.add_seal(4, history=["obs-4"])
        stub_store.partial_tags["T2*"] = [later, earlier]

        outcome = await SealResolver(stub_store).validate(make_payload(tags=["T2*"]))

        assert isinstance(outcome, AmbiguousMatches)
        assert [m.seal.seal_id for m in outcome.matches] == [9, 4]
        assert [m.observations for m in outcome.matches] == [["obs-9"], ["obs-4"]]

    async def test_partial_mark_uses_season(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.partial_marks[("M?", 2022)] = [stub_store.add_seal(5)]

        outcome = await SealResolver(stub_store).validate(
            make_payload(marks=["m?"], date="2022-01-15")
        )

        assert isinstance(outcome, AmbiguousMatches)
        assert len(outcome.matches) == 1
        assert ("partial_mark", "M?", 2022) in stub_store.lookups

    async def test_no_candidates_is_empty_match_list(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        outcome = await SealResolver(stub_store).validate(make_payload(tags=["Z*"]))

        assert isinstance(outcome, AmbiguousMatches)
        assert outcome.matches == []


class TestFormatRejection:
    async def test_no_identifiers(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        with pytest.raises(FormatRejected) as exc_info:
            await SealResolver(stub_store).validate(make_payload())
        assert exc_info.value.messages == ["Bad mark or tag format."]

    async def test_only_unusable_identifiers(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        with pytest.raises(FormatRejected):
            await SealResolver(stub_store).validate(make_payload(tags=["**"], marks=["#1"]))


class TestCollisionGuard:
    async def test_new_tag_already_registered(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_tags["T100"] = stub_store.add_seal(1)
        payload = make_payload(tags=[{"number": "T100", "isNew": True}])

        with pytest.raises(CollisionRejected) as exc_info:
            await SealResolver(stub_store).validate(payload)
        assert exc_info.value.messages == [
            "A tag that is listed as new already exists in the database."
        ]

    async def test_new_mark_already_registered(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_marks[("M5", 2020)] = stub_store.add_seal(1)
        payload = make_payload(marks=[{"number": "M5", "isNew": True}])

        with pytest.raises(CollisionRejected) as exc_info:
            await SealResolver(stub_store).validate(payload)
        assert exc_info.value.messages == [
            "A mark that is listed as new already exists in the database."
        ]

    async def test_new_mark_from_other_season_passes(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_marks[("M5", 2019)] = stub_store.add_seal(1)
        payload = make_payload(marks=[{"number": "M5", "isNew": True}])

        outcome = await SealResolver(stub_store).validate(payload)

        assert isinstance(outcome, NoSealFound)

    async def test_tag_violation_reported_before_mark(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_tags["T1"] = stub_store.add_seal(1)
        stub_store.exact_marks[("M1", 2020)] = stub_store.add_seal(2)
        payload = make_payload(
            tags=[{"number": "T1", "isNew": True}],
            marks=[{"number": "M1", "isNew": True}],
        )

        with pytest.raises(CollisionRejected, match="A tag"):
            await SealResolver(stub_store).validate(payload)

    async def test_claim_is_paired_with_its_own_entry(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        # The unusable first entry is dropped; the registered T1 is not claimed
        # as new, so nothing collides even though entry 0 claims is_new.
        stub_store.exact_tags["T1"] = stub_store.add_seal(1)
        payload = make_payload(
            tags=[{"number": "--", "isNew": True}, {"number": "T1", "isNew": False}]
        )

        outcome = await SealResolver(stub_store).validate(payload)

        assert isinstance(outcome, ExactMatch)

    async def test_existing_identifier_not_claimed_new_passes(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_tags["T1"] = stub_store.add_seal(1)

        outcome = await SealResolver(stub_store).validate(make_payload(tags=["T1"]))

        assert isinstance(outcome, ExactMatch)


class LastMarkPolicy:
    """Resolve on the last mark only, ignoring tags."""

    def select(
        self, tags: Sequence[Identifier], marks: Sequence[Identifier]
    ) -> Identifier | None:
        return marks[-1] if marks else None


class TestIdentifierPolicy:
    async def test_custom_policy_replaces_selection(
        self, stub_store: StubRegistryStore, make_payload: MakePayload
    ) -> None:
        stub_store.exact_tags["T1"] = stub_store.add_seal(1)
        stub_store.exact_marks[("M2", 2020)] = target = stub_store.add_seal(2)
        payload = make_payload(tags=["T1"], marks=["M1", "M2"])

        outcome = await SealResolver(stub_store, policy=LastMarkPolicy()).validate(payload)

        assert isinstance(outcome, ExactMatch)
        assert outcome.seal is target
