from conerefine import GeneratorTable, SimplexCell


def make_cell():
    t = GeneratorTable(2, [[1, 0], [1, 2]])
    return SimplexCell([1, 0], 2, 0, 0), t


def test_rays_are_sorted():
    c, _ = make_cell()
    assert c.rays == (0, 1)
    assert c.is_leaf()
    assert not c.is_unimodular()


def test_facets_are_cached():
    c, t = make_cell()
    f1 = c.facets(t)
    f2 = c.facets(t)
    assert f1 is f2
    assert f1 == [(2, -1), (0, 1)]


def test_opposite_facets_interior():
    c, t = make_cell()
    assert c.opposite_facets((1, 1), t) == [0, 1]


def test_opposite_facets_outside():
    c, t = make_cell()
    assert c.opposite_facets((0, 1), t) is None
    assert c.opposite_facets((1, -1), t) is None


def test_opposite_facets_on_ray():
    c, t = make_cell()
    assert c.opposite_facets((1, 0), t) == [0]
    assert c.opposite_facets((2, 4), t) == [1]


def test_contains():
    c, t = make_cell()
    assert c.contains((1, 1), t)
    assert c.contains((1, 0), t)
    assert not c.contains((1, 0), t, strict=True)
    assert c.contains((3, 2), t, strict=True)
    assert not c.contains((0, 1), t)
