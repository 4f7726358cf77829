"""
Merkle Tree Unit Tests
Tests for svm_merkle/merkle/merkle_tree.py

Covers:
1. Lifecycle - open/sealed state errors, empty tree, re-merklize
2. Padding correctness - odd counts pair the last node with itself
3. Proofs for every index recompute the root
4. Proof-by-hash equivalence and first-match on duplicates
5. Known Bitcoin block roots (double SHA-256)
"""
import pytest

from fixtures.merkle_fixtures import (
    BITCOIN_ALGORITHM,
    BITCOIN_HASH_SIZE,
    BLOCK_9_ROOT,
    BLOCK_9_TXIDS,
    BLOCK_100000_ROOT,
    BLOCK_100000_TXIDS,
    BLOCK_100002_ROOT,
    BLOCK_100002_TXIDS,
    LETTER_LEAVES,
)
from svm_merkle.config import MerkleConfig, set_default_config
from svm_merkle.crypto.backend import HashBackend, HashingAlgorithm
from svm_merkle.crypto.hashing import canonical_bytes, sha256
from svm_merkle.merkle.merkle_tree import MerkleTree, build_level
from svm_merkle.schemas.errors import (
    AlreadySealedError,
    EmptyTreeError,
    IndexOutOfRangeError,
    InvalidConfigurationError,
    LeafNotFoundError,
    MalformedProofInputError,
    NotSealedError,
)


ALL_ALGORITHMS = list(HashingAlgorithm)


class TestLifecycle:
    """Open -> sealed state machine."""

    def test_new_tree_is_open_and_empty(self):
        tree = MerkleTree(HashingAlgorithm.SHA256, 32)

        assert not tree.is_sealed
        assert tree.leaf_count == 0
        assert len(tree) == 0

    def test_root_before_merklize_raises(self):
        tree = MerkleTree(HashingAlgorithm.SHA256, 32)
        tree.add_leaf(b"a")

        with pytest.raises(NotSealedError):
            tree.get_merkle_root()

    def test_proofs_before_merklize_raise(self):
        tree = MerkleTree(HashingAlgorithm.SHA256, 32)
        tree.add_leaf(b"a")

        with pytest.raises(NotSealedError):
            tree.merkle_proof_index(0)
        with pytest.raises(NotSealedError):
            tree.merkle_proof_hash(sha256(b"a"))

    def test_levels_before_merklize_raise(self):
        tree = MerkleTree(HashingAlgorithm.SHA256, 32)

        with pytest.raises(NotSealedError):
            tree.levels

    def test_empty_merklize_raises(self):
        tree = MerkleTree(HashingAlgorithm.SHA256, 32)

        with pytest.raises(EmptyTreeError):
            tree.merklize()
        assert not tree.is_sealed

    def test_add_after_merklize_raises(self, letter_tree):
        with pytest.raises(AlreadySealedError):
            letter_tree.add_leaf(b"e")
        with pytest.raises(AlreadySealedError):
            letter_tree.add_leaves([b"e"])
        with pytest.raises(AlreadySealedError):
            letter_tree.add_hash(sha256(b"e"))
        with pytest.raises(AlreadySealedError):
            letter_tree.add_hashes([sha256(b"e")])
        with pytest.raises(AlreadySealedError):
            letter_tree.add_object({"e": 1})
        assert letter_tree.leaf_count == 4

    def test_merklize_again_is_idempotent(self, letter_tree):
        root = letter_tree.get_merkle_root()
        levels = letter_tree.levels

        letter_tree.merklize()

        assert letter_tree.get_merkle_root() == root
        assert letter_tree.levels == levels

    def test_invalid_configuration(self):
        with pytest.raises(InvalidConfigurationError):
            MerkleTree(HashingAlgorithm.SHA256, 33)
        with pytest.raises(InvalidConfigurationError):
            MerkleTree(7, 32)


class TestSingleLeaf:

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_root_is_leaf_hash(self, make_tree, algorithm):
        tree = make_tree([b"only"], algorithm=algorithm)

        assert tree.get_merkle_root() == HashBackend(algorithm, 32).hash(b"only")
        assert tree.depth == 0

    def test_proof_has_no_siblings(self, make_tree):
        tree = make_tree([b"only"])

        proof = tree.merkle_proof_index(0)

        assert proof.get_pairing_hashes() == b""
        assert proof.merklize(b"only") == tree.get_merkle_root()


class TestPaddingCorrectness:
    """Odd-count levels pair the last node with itself."""

    def test_three_leaves(self, make_tree):
        tree = make_tree([b"a", b"b", b"c"])
        a, b, c = (sha256(x) for x in (b"a", b"b", b"c"))

        # Level 0: [a, b, c]
        # Level 1: [pair(a,b), pair(c,c)]
        ab = sha256(a + b)
        cc = sha256(c + c)

        assert tree.get_merkle_root() == sha256(ab + cc)

    def test_five_leaves(self, make_tree):
        leaves = [f"leaf{i}".encode() for i in range(5)]
        tree = make_tree(leaves)
        a, b, c, d, e = (sha256(x) for x in leaves)

        # Level 1: [ab, cd, ee]; Level 2: [abcd, eeee]
        ab, cd, ee = sha256(a + b), sha256(c + d), sha256(e + e)
        abcd, eeee = sha256(ab + cd), sha256(ee + ee)

        assert tree.get_merkle_root() == sha256(abcd + eeee)

    def test_level_sizes(self, make_tree):
        tree = make_tree([bytes([i]) for i in range(5)])

        assert [len(level) for level in tree.levels] == [5, 3, 2, 1]

    def test_build_level_odd(self):
        backend = HashBackend(HashingAlgorithm.SHA256, 32)
        nodes = [backend.hash(x) for x in (b"a", b"b", b"c")]

        parents = build_level(backend, nodes)

        assert parents == [
            backend.pair_hash(nodes[0], nodes[1]),
            backend.pair_hash(nodes[2], nodes[2]),
        ]


class TestRootDeterminism:

    def test_same_leaves_same_root(self, make_tree):
        leaves = [f"leaf{i}".encode() for i in range(6)]

        assert make_tree(leaves).get_merkle_root() == make_tree(leaves).get_merkle_root()

    def test_leaf_order_matters(self, make_tree):
        assert (
            make_tree([b"a", b"b", b"c"]).get_merkle_root()
            != make_tree([b"c", b"b", b"a"]).get_merkle_root()
        )

    def test_algorithms_give_different_roots(self, make_tree):
        roots = {make_tree(LETTER_LEAVES, algorithm=a).get_merkle_root() for a in ALL_ALGORITHMS}

        assert len(roots) == len(ALL_ALGORITHMS)


class TestProofExtraction:

    def test_letter_scenario(self, letter_tree):
        """Proof for "c" has two siblings and recomputes the root."""
        proof = letter_tree.merkle_proof_index(2)

        assert letter_tree.depth == 2
        assert proof.depth == 2
        assert proof.siblings == [sha256(b"d"), sha256(sha256(b"a") + sha256(b"b"))]
        assert proof.merklize(b"c") == letter_tree.get_merkle_root()
        assert proof.merklize(b"x") != letter_tree.get_merkle_root()

    def test_odd_scenario_last_leaf(self, make_tree):
        """The unpaired leaf's sibling is itself."""
        tree = make_tree([b"a", b"b", b"c"])

        proof = tree.merkle_proof_index(2)

        assert proof.siblings[0] == sha256(b"c")
        assert proof.merklize(b"c") == tree.get_merkle_root()

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 7, 8, 9, 16, 17])
    def test_every_index_round_trips(self, make_tree, algorithm, count):
        leaves = [f"leaf-{i}".encode() for i in range(count)]
        tree = make_tree(leaves, algorithm=algorithm)
        root = tree.get_merkle_root()

        for i, leaf in enumerate(leaves):
            proof = tree.merkle_proof_index(i)
            assert proof.depth == tree.depth
            assert proof.merklize(leaf) == root, f"Proof failed for index {i}"

    @pytest.mark.parametrize("hash_size", [1, 8, 20, 31])
    def test_truncated_digests_round_trip(self, make_tree, hash_size):
        leaves = [f"leaf-{i}".encode() for i in range(6)]
        tree = make_tree(leaves, algorithm=HashingAlgorithm.KECCAK, hash_size=hash_size)
        root = tree.get_merkle_root()

        assert len(root) == hash_size
        for i, leaf in enumerate(leaves):
            assert tree.merkle_proof_index(i).merklize(leaf) == root

    def test_proof_carries_tree_parameters(self, make_tree):
        tree = make_tree(LETTER_LEAVES, algorithm=HashingAlgorithm.KECCAKD, hash_size=20)

        proof = tree.merkle_proof_index(3)

        assert proof.algorithm is HashingAlgorithm.KECCAKD
        assert proof.hash_size == 20
        assert proof.index == 3

    def test_index_out_of_range(self, letter_tree):
        with pytest.raises(IndexOutOfRangeError):
            letter_tree.merkle_proof_index(4)
        with pytest.raises(IndexOutOfRangeError):
            letter_tree.merkle_proof_index(-1)
        with pytest.raises(IndexError):
            letter_tree.merkle_proof_index(100)

    def test_non_int_index_rejected(self, letter_tree):
        with pytest.raises(IndexOutOfRangeError):
            letter_tree.merkle_proof_index("1")


class TestProofByHash:

    def test_hash_and_index_proofs_agree(self, letter_tree):
        for i, leaf in enumerate(LETTER_LEAVES):
            by_hash = letter_tree.merkle_proof_hash(sha256(leaf))
            by_index = letter_tree.merkle_proof_index(i)
            assert by_hash == by_index

    def test_duplicates_use_lowest_index(self, make_tree):
        tree = make_tree([b"x", b"dup", b"y", b"dup"])

        proof = tree.merkle_proof_hash(sha256(b"dup"))

        assert proof.index == 1
        assert proof.merklize(b"dup") == tree.get_merkle_root()

    def test_unknown_hash_raises(self, letter_tree):
        with pytest.raises(LeafNotFoundError):
            letter_tree.merkle_proof_hash(sha256(b"z"))

    def test_leaf_not_found_is_lookup_error(self, letter_tree):
        with pytest.raises(LookupError):
            letter_tree.merkle_proof_hash(b"\x00" * 32)


class TestLeafAccess:

    def test_get_leaf_hash(self):
        tree = MerkleTree(HashingAlgorithm.SHA256D, 32)
        tree.add_leaf(b"a")

        assert tree.get_leaf_hash(0) == sha256(sha256(b"a"))
        with pytest.raises(IndexOutOfRangeError):
            tree.get_leaf_hash(1)

    def test_add_hashes_validates_all_first(self):
        tree = MerkleTree(HashingAlgorithm.SHA256, 32)

        with pytest.raises(MalformedProofInputError):
            tree.add_hashes([sha256(b"a"), b"short"])
        assert tree.leaf_count == 0

    def test_add_hash_wrong_size(self):
        tree = MerkleTree(HashingAlgorithm.SHA256, 16)

        with pytest.raises(MalformedProofInputError):
            tree.add_hash(sha256(b"a"))

    def test_add_object_uses_canonical_json(self):
        tree = MerkleTree(HashingAlgorithm.SHA256, 32)
        tree.add_object({"b": 2, "a": 1})

        assert tree.get_leaf_hash(0) == sha256(canonical_bytes({"a": 1, "b": 2}))

    def test_levels_is_a_copy(self, letter_tree):
        levels = letter_tree.levels
        levels[0].clear()

        assert len(letter_tree.levels[0]) == 4


class TestFromConfig:

    def test_from_explicit_config(self):
        tree = MerkleTree.from_config(MerkleConfig(algorithm="keccakd", hash_size=20))

        assert tree.algorithm is HashingAlgorithm.KECCAKD
        assert tree.hash_size == 20

    def test_from_default_config(self):
        set_default_config(MerkleConfig(algorithm=HashingAlgorithm.SHA256D, hash_size=16))

        tree = MerkleTree.from_config()

        assert tree.algorithm is HashingAlgorithm.SHA256D
        assert tree.hash_size == 16


class TestBitcoinBlocks:
    """Known mainnet merkle roots, built from txids with add_hashes()."""

    @pytest.mark.parametrize("txids,root", [
        (BLOCK_9_TXIDS, BLOCK_9_ROOT),
        (BLOCK_100000_TXIDS, BLOCK_100000_ROOT),
        (BLOCK_100002_TXIDS, BLOCK_100002_ROOT),
    ])
    def test_block_root_and_proofs(self, txids, root):
        tree = MerkleTree(BITCOIN_ALGORITHM, BITCOIN_HASH_SIZE)
        tree.add_hashes(txids)
        tree.merklize()

        assert tree.get_merkle_root() == root
        for i in range(tree.leaf_count):
            proof = tree.merkle_proof_index(i)
            assert proof.merklize_hash(tree.get_leaf_hash(i)) == root
