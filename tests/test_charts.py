from webapp.charts import bar_chart, nice_step, pie_chart


def test_nice_step():
    assert nice_step(150) == 50
    assert nice_step(100) == 25
    assert nice_step(8) == 2
    assert nice_step(0) == 1


def test_bar_chart_layout():
    chart = bar_chart(
        [{"month": "2024-01", "total": 150}, {"month": "2024-02", "total": 30}],
        width=480,
        height=250,
    )
    assert [bar.label for bar in chart.bars] == ["2024-01", "2024-02"]
    assert [tick.value for tick in chart.ticks] == [0, 50, 100, 150]
    tallest, shorter = chart.bars
    assert tallest.height == 210
    assert tallest.y == 10
    assert shorter.height == 42
    assert tallest.y + tallest.height == chart.plot_bottom
    assert tallest.x < shorter.x


def test_bar_chart_empty():
    chart = bar_chart([])
    assert chart.empty
    assert chart.ticks[0].value == 0


def test_pie_chart_slices():
    chart = pie_chart(
        [
            {"category": "Food", "total": 75, "color": "#6366f1"},
            {"category": "Bills", "total": 25, "color": "#ef4444"},
            {"category": "Other", "total": 0, "color": "#a855f7"},
        ]
    )
    assert [s.label for s in chart.slices] == ["Food", "Bills"]
    assert [s.share for s in chart.slices] == [0.75, 0.25]
    assert chart.slices[0].path.startswith("M 160.0 125.0 L 160.0 45.0 A 80.0 80.0 0 1 1")
    assert " 0 0 1 " in chart.slices[1].path
    assert not chart.slices[0].full_circle


def test_pie_chart_single_category_is_full_circle():
    chart = pie_chart([{"category": "Food", "total": 10, "color": "#6366f1"}])
    assert chart.slices[0].full_circle
    assert chart.slices[0].share == 1


def test_pie_chart_empty():
    assert pie_chart([]).empty
