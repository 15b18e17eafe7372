from __future__ import annotations

from src.attended_checkin.attended_checkin.checkin.pager import PageWindow


def test_rebind_keeps_window_when_content_is_not_replaced():
    pager = PageWindow(page_size=4, start_index=4)

    pager.rebind(10, replace_content=False)

    assert pager.start_index == 4
    assert pager.visible


def test_rebind_clamps_to_last_page_when_list_shrinks():
    pager = PageWindow(page_size=4, start_index=8)

    pager.rebind(6, replace_content=False)

    assert pager.start_index == 4
    assert pager.page_index == 1


def test_rebind_replaced_content_starts_over():
    pager = PageWindow(page_size=4, start_index=8)

    pager.rebind(20, replace_content=True)

    assert pager.start_index == 0
    assert pager.visible


def test_empty_list_hides_pager():
    pager = PageWindow(page_size=4, start_index=4, visible=True)

    pager.rebind(0, replace_content=False)

    assert not pager.visible
    assert pager.start_index == 0


def test_set_page_properties_ignores_non_positive_page_size():
    pager = PageWindow(page_size=4)

    pager.set_page_properties(-3, 0)

    assert pager.page_size == 4
    assert pager.start_index == 0


def test_page_of_slices_current_window():
    pager = PageWindow(page_size=3, start_index=3)

    assert pager.page_of(list(range(8))) == [3, 4, 5]
