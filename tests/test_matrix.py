import numpy as np
import pytest

from autodiff import (DenseMatrix, DimensionError, NonSquareMatrixError, SparseMatrix,
                      as_dense_matrix, as_sparse_matrix, new_dense_matrix, new_dense_vector,
                      new_sparse_matrix, null_dense_matrix, null_scalar, null_sparse_matrix)


def _dense(a):
    a = np.asarray(a, dtype=float)
    return new_dense_matrix(a, *a.shape)


def _sparse(a):
    a = np.asarray(a, dtype=float)
    i, j = np.nonzero(a)
    return new_sparse_matrix(i.tolist(), j.tolist(), a[i, j].tolist(), *a.shape)


@pytest.fixture(params=["dense", "sparse"])
def matrix_kind(request):
    return _dense if request.param == "dense" else _sparse


# ---------------- indexing and views ---------------- #

def test_row_major_layout():
    m = new_dense_matrix([1, 2, 3, 4, 5, 6], 2, 3)
    assert isinstance(m, DenseMatrix)
    assert m.dims() == (2, 3)
    assert m.at(1, 0).get_float64() == 4
    assert m[0, 2].get_float64() == 3
    assert m._index(1, 2) == 5
    assert str(m) == "[[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]"


def test_nested_values():
    m = new_dense_matrix([[1, 2], [3, 4]], 2, 2)
    np.testing.assert_array_equal(m.values(), [[1, 2], [3, 4]])
    with pytest.raises(DimensionError):
        new_dense_matrix([1, 2, 3], 2, 2)


def test_index_out_of_bounds():
    m = null_dense_matrix(2, 3)
    with pytest.raises(IndexError, match=r"index \(2,0\) out of bounds for matrix of dimension 2x3"):
        m.at(2, 0)
    with pytest.raises(IndexError):
        m.const_at(0, -1)


def test_transposed_view(matrix_kind):
    a = np.array([[1.0, 0.0, 3.0], [4.0, 5.0, 0.0]])
    m = matrix_kind(a)
    t = m.t()
    assert t.dims() == (3, 2)
    np.testing.assert_array_equal(t.values(), a.T)
    t.at(2, 1).set_value(7.0)
    assert m.const_at(1, 2).get_float64() == 7.0
    np.testing.assert_array_equal(t.t().values(), m.values())


def test_slice_view(matrix_kind):
    a = np.arange(1.0, 13.0).reshape(3, 4)
    m = matrix_kind(a)
    s = m.slice(1, 3, 1, 3)
    assert s.dims() == (2, 2)
    np.testing.assert_array_equal(s.values(), a[1:3, 1:3])
    s.at(0, 0).set_value(-1.0)
    assert m.const_at(1, 1).get_float64() == -1.0
    with pytest.raises(IndexError):
        m.slice(0, 4, 0, 1)


def test_slice_of_transposed_view():
    a = np.arange(1.0, 13.0).reshape(3, 4)
    m = _dense(a)
    s = m.t().slice(1, 3, 0, 2)
    np.testing.assert_array_equal(s.values(), a.T[1:3, 0:2])


@pytest.mark.parametrize("shape", [(1, 1), (2, 3), (3, 2), (4, 4), (1, 5), (5, 1), (3, 5)])
def test_tip(shape, matrix_kind):
    a = np.arange(1.0, shape[0] * shape[1] + 1).reshape(shape)
    m = matrix_kind(a)
    m.tip()
    assert m.dims() == (shape[1], shape[0])
    np.testing.assert_array_equal(m.values(), a.T)
    assert not m.transposed
    if isinstance(m, DenseMatrix):
        # the backing store is plain row-major again
        np.testing.assert_array_equal(m.as_vector().values(), a.T.ravel())


def test_tip_moves_derivatives():
    m = _dense([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    m.variables(1)
    m.tip()
    # old (0, 2) is variable 2
    assert m.const_at(2, 0).get_derivative(2) == 1.0
    assert m.const_at(0, 1).get_derivative(3) == 1.0


def test_tip_of_transposed_view():
    a = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    m = _dense(a)
    t = m.t()
    t.tip()
    np.testing.assert_array_equal(t.values(), a)
    np.testing.assert_array_equal(m.values(), a)


def test_tip_of_slice_is_rejected():
    m = _dense(np.ones((3, 3)))
    with pytest.raises(ValueError):
        m.slice(0, 2, 0, 2).tip()


def test_row_col_diag_share_elements():
    m = _dense([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    np.testing.assert_array_equal(m.row(1).values(), [4, 5, 6])
    np.testing.assert_array_equal(m.col(2).values(), [3, 6, 9])
    np.testing.assert_array_equal(m.diag().values(), [1, 5, 9])
    m.row(0).at(1).set_value(20)
    m.col(0).at(2).set_value(70)
    m.diag().at(2).set_value(90)
    np.testing.assert_array_equal(m.values(), [[1, 20, 3], [4, 5, 6], [70, 8, 90]])
    t = m.t()
    np.testing.assert_array_equal(t.row(0).values(), [1, 4, 70])
    np.testing.assert_array_equal(t.col(0).values(), [1, 20, 3])


def test_diag_of_non_square(matrix_kind):
    with pytest.raises(NonSquareMatrixError):
        matrix_kind(np.ones((2, 3))).diag()


def test_as_vector():
    m = _dense([[1, 2], [3, 4]])
    v = m.as_vector()
    v.at(3).set_value(40)
    assert m.const_at(1, 1).get_float64() == 40
    np.testing.assert_array_equal(m.t().as_vector().values(), [1, 3, 2, 40])


# ---------------- products ---------------- #

def test_mdotm(rng):
    a = rng.normal(size=(3, 4))
    b = rng.normal(size=(4, 2))
    r = null_dense_matrix(3, 2).mdotm(_dense(a), _dense(b))
    np.testing.assert_allclose(r.values(), a @ b)


def test_mdotm_aliased_result(rng):
    a = rng.normal(size=(3, 3))
    b = rng.normal(size=(3, 3))
    m = _dense(a)
    m.mdotm(m, _dense(b))
    np.testing.assert_allclose(m.values(), a @ b)
    m = _dense(a)
    m.mdotm(m.t(), m)
    np.testing.assert_allclose(m.values(), a.T @ a)


def test_mdotm_dimensions():
    with pytest.raises(DimensionError):
        null_dense_matrix(2, 2).mdotm(null_dense_matrix(2, 3), null_dense_matrix(2, 2))
    with pytest.raises(DimensionError):
        null_dense_matrix(2, 3).mdotm(null_dense_matrix(2, 2), null_dense_matrix(2, 2))


def test_mdotm_mixed_storage(rng):
    a = np.array([[1.0, 0.0], [0.0, 2.0], [3.0, 0.0]])
    b = rng.normal(size=(2, 2))
    r = null_dense_matrix(3, 2).mdotm(_sparse(a), _dense(b))
    np.testing.assert_allclose(r.values(), a @ b)


def test_mdotm_derivatives():
    a = _dense([[1.0, 2.0], [3.0, 4.0]])
    a.variables(1)
    r = null_dense_matrix(2, 2).mdotm(a, a)
    # r[0, 0] = a00² + a01 a10
    np.testing.assert_allclose(r.const_at(0, 0).get_gradient(), [2.0, 3.0, 2.0, 0.0])


def test_outer():
    a = new_dense_vector([1, 2])
    b = new_dense_vector([3, 4, 5])
    r = null_dense_matrix(2, 3).outer(a, b)
    np.testing.assert_array_equal(r.values(), np.outer([1, 2], [3, 4, 5]))
    with pytest.raises(DimensionError):
        null_dense_matrix(3, 3).outer(a, b)


# ---------------- element-wise arithmetic ---------------- #

def test_elementwise(matrix_kind):
    a = np.array([[1.0, 0.0], [2.0, 4.0]])
    b = np.array([[3.0, 1.0], [0.0, 2.0]])
    ma, mb = matrix_kind(a), matrix_kind(b)
    r = null_dense_matrix(2, 2)
    np.testing.assert_array_equal(r.maddm(ma, mb).values(), a + b)
    np.testing.assert_array_equal(r.msubm(ma, mb).values(), a - b)
    np.testing.assert_array_equal(r.mmulm(ma, mb).values(), a * b)
    np.testing.assert_array_equal(r.madds(ma, 1).values(), a + 1)
    np.testing.assert_array_equal(r.msubs(ma, 1).values(), a - 1)
    np.testing.assert_array_equal(r.mmuls(ma, 3).values(), a * 3)
    np.testing.assert_array_equal(r.mdivs(ma, 2).values(), a / 2)
    with pytest.raises(DimensionError):
        r.maddm(ma, null_dense_matrix(2, 3))


def test_mdivm_visits_every_element():
    a = _sparse([[1.0, 0.0], [0.0, 4.0]])
    b = _dense([[2.0, 1.0], [1.0, 2.0]])
    r = null_sparse_matrix(2, 2).mdivm(a, b)
    np.testing.assert_array_equal(r.values(), [[0.5, 0.0], [0.0, 2.0]])
    assert r.support() == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_map_reduce(matrix_kind):
    m = matrix_kind([[1.0, 0.0], [0.0, 2.0]])
    m.map_set(lambda s: null_scalar().mul(s, s))
    r = m.reduce(lambda r, s: r.add(r, s), null_scalar())
    assert r.get_float64() == 5.0


# ---------------- state ---------------- #

def test_set_identity(matrix_kind):
    m = matrix_kind(np.full((3, 3), 2.0))
    m.set_identity()
    np.testing.assert_array_equal(m.values(), np.eye(3))


def test_set_identity_sparse_stores_diagonal_only():
    m = null_sparse_matrix(3, 3).set_identity()
    assert m.support() == [(0, 0), (1, 1), (2, 2)]


def test_set_and_equals(matrix_kind):
    a = matrix_kind([[1.0, 2.0], [0.0, 4.0]])
    r = null_dense_matrix(2, 2).set(a)
    assert r.equals(a)
    r.at(1, 0).set_value(1e-3)
    assert not r.equals(a)
    assert r.equals(a, epsilon=1e-2)
    r.reset()
    np.testing.assert_array_equal(r.values(), np.zeros((2, 2)))


def test_is_symmetric(matrix_kind):
    assert matrix_kind([[1.0, 2.0], [2.0, 3.0]]).is_symmetric()
    assert not matrix_kind([[1.0, 2.0], [0.0, 3.0]]).is_symmetric()
    assert not matrix_kind(np.ones((2, 3))).is_symmetric()


def test_swaps(matrix_kind):
    a = np.arange(1.0, 10.0).reshape(3, 3)
    m = matrix_kind(a)
    m.swap(0, 0, 2, 2)
    assert m.const_at(0, 0).get_float64() == 9.0
    m = matrix_kind(a)
    m.swap_rows(0, 2)
    np.testing.assert_array_equal(m.values(), a[[2, 1, 0]])
    m = matrix_kind(a)
    m.swap_columns(0, 1)
    np.testing.assert_array_equal(m.values(), a[:, [1, 0, 2]])
    with pytest.raises(NonSquareMatrixError):
        matrix_kind(np.ones((2, 3))).swap_rows(0, 1)


def test_permutations(matrix_kind):
    a = np.arange(1.0, 10.0).reshape(3, 3)
    pi = [1, 2, 0]
    m = matrix_kind(a)
    m.permute_rows(pi)
    np.testing.assert_array_equal(m.values(), a[pi])
    m = matrix_kind(a)
    m.permute_columns(pi)
    np.testing.assert_array_equal(m.values(), a[:, pi])
    m = matrix_kind(a)
    m.symmetric_permutation(pi)
    np.testing.assert_array_equal(m.values(), a[np.ix_(pi, pi)])
    with pytest.raises(ValueError):
        m.permute_rows([0, 0, 1])


def test_permutation_keeps_row_views_consistent():
    m = _dense(np.arange(1.0, 10.0).reshape(3, 3))
    row = m.row(0)
    m.permute_rows([2, 0, 1])
    np.testing.assert_array_equal(row.values(), [7, 8, 9])


def test_trace_and_norm(matrix_kind):
    a = np.array([[1.0, 2.0], [0.0, 4.0]])
    m = matrix_kind(a)
    assert null_scalar().mtrace(m).get_float64() == 5.0
    assert null_scalar().mnorm(m).get_float64() == pytest.approx(np.linalg.norm(a))
    with pytest.raises(NonSquareMatrixError):
        null_scalar().mtrace(matrix_kind(np.ones((2, 3))))


def test_matrix_variables_gradient():
    m = _dense([[3.0, 0.0], [0.0, 4.0]])
    m.variables(1)
    r = null_scalar().mnorm(m)
    assert r.get_float64() == 5.0
    np.testing.assert_allclose(r.get_gradient(), [0.6, 0.0, 0.0, 0.8])


# ---------------- sparse storage ---------------- #

def test_sparse_matrix_construction():
    m = new_sparse_matrix([0, 1], [1, 0], [2.0, 3.0], 2, 3)
    assert isinstance(m, SparseMatrix)
    np.testing.assert_array_equal(m.values(), [[0, 2, 0], [3, 0, 0]])
    assert m.support() == [(0, 1), (1, 0)]
    assert m.nnz() == 2
    with pytest.raises(IndexError):
        new_sparse_matrix([2], [0], [1.0], 2, 3)
    with pytest.raises(DimensionError):
        new_sparse_matrix([0, 1], [0], [1.0], 2, 3)


def test_sparse_rows_reference_stored_elements():
    m = new_sparse_matrix([0, 1], [1, 0], [2.0, 3.0], 2, 2)
    r = m.row(0)
    assert r.support() == [1]
    r.at(1).set_value(20.0)
    assert m.const_at(0, 1).get_float64() == 20.0
    np.testing.assert_array_equal(m.col(0).values(), [0, 3])
    np.testing.assert_array_equal(m.diag().values(), [0, 0])


def test_sparse_compact():
    m = new_sparse_matrix([0, 1], [1, 0], [2.0, 3.0], 2, 2)
    m.at(0, 1).set_value(0.0)
    m.at(1, 1)
    m.compact()
    assert m.support() == [(1, 0)]


def test_sparse_as_vector():
    m = new_sparse_matrix([0, 1], [1, 0], [2.0, 3.0], 2, 2)
    np.testing.assert_array_equal(m.as_vector().values(), [0, 2, 3, 0])
    np.testing.assert_array_equal(m.t().as_vector().values(), [0, 3, 2, 0])


def test_storage_conversions():
    a = np.array([[0.0, 1.0], [2.0, 0.0]])
    s = as_sparse_matrix(_dense(a))
    assert isinstance(s, SparseMatrix)
    assert s.support() == [(0, 1), (1, 0)]
    d = as_dense_matrix(s.t())
    assert isinstance(d, DenseMatrix)
    np.testing.assert_array_equal(d.values(), a.T)
    c = d.clone()
    c.at(0, 0).set_value(5.0)
    assert d.const_at(0, 0).get_float64() == 0.0
