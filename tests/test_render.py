"""Tests for rendering view trees into HTML"""

import re

import crosspreview
import previewtest
from previewtest import node


def test_text_escaped_once():
    root = node("Text", text='<b>&"x"</b>')
    first = previewtest.html(root)
    assert "&lt;b&gt;&amp;&quot;x&quot;&lt;/b&gt;" in first
    assert "&amp;lt;" not in first
    assert previewtest.html(root) == first
    assert root.props["text"] == '<b>&"x"</b>'


def test_attribute_values_escaped():
    root = node("TextField", placeholder='"><script>', modifiers=[
        crosspreview.Modifier("accessibilityLabel", {"text": "a&b"}, "text"),
    ])
    markup = previewtest.html(root)
    assert "<script>" not in markup
    assert 'placeholder="&quot;&gt;&lt;script&gt;"' in markup
    assert 'aria-label="a&amp;b"' in markup


def test_padding_last_wins():
    root = node("Text", text="a", modifiers=[
        crosspreview.Modifier("padding", {"all": 4}, "mixed"),
        crosspreview.Modifier("padding", {"all": 16}, "mixed"),
    ])
    style = previewtest.style_of(previewtest.html(root))
    assert previewtest.effective(style, "padding") == "16px"
    assert style.index("padding: 4px") < style.index("padding: 16px")


def test_default_padding_option():
    root = node("Text", text="a", modifiers=[crosspreview.Modifier("padding")])
    style = previewtest.style_of(previewtest.html(root, default_padding=12))
    assert previewtest.effective(style, "padding") == "12px"


@previewtest.params(
    "code prop value",
    color=('Text("a").foregroundColor(.red)', "color", "#ff3b30"),
    hex_color=('Text("a").foregroundColor(Color(hex: "#00FF00"))', "color", "#00ff00"),
    faded=('Text("a").foregroundColor(.blue.opacity(0.5))', "color", "rgba(0, 122, 255, 0.5)"),
    font=('Text("a").font(.title)', "font-size", "28px"),
    weight=('Text("a").fontWeight(.bold)', "font-weight", "700"),
    corner=('Text("a").cornerRadius(8)', "border-radius", "8px"),
    frame=('Text("a").frame(width: 120)', "width", "120px"),
    infinity=('Text("a").frame(maxWidth: .infinity)', "max-width", "100%"),
    opacity=('Text("a").opacity(0.4)', "opacity", "0.4"),
    shadow=('Text("a").shadow(radius: 4)', "box-shadow", "0px 0px 4px rgba(0, 0, 0, 0.33)"),
    rotation=('Text("a").rotationEffect(.degrees(30))', "transform", "rotate(30deg)"),
    tracking=('Text("a").tracking(2)', "letter-spacing", "2px"),
    upper=('Text("a").textCase(.uppercase)', "text-transform", "uppercase"),
    lines=('Text("a").lineLimit(1)', "white-space", "nowrap"),
    align=('Text("a").multilineTextAlignment(.trailing)', "text-align", "right"),
    shape_fill=("Circle().foregroundColor(.green)", "background-color", "#34c759"),
    gradient=("Rectangle().fill(LinearGradient(colors: [.red, .blue], startPoint: .top, endPoint: .bottom))",
              "background", "linear-gradient(to bottom, #ff3b30, #007aff)"),
    material=('Text("a").background(.ultraThinMaterial)', "backdrop-filter", "blur(10px)"),
    disabled=('Text("a").disabled(true)', "pointer-events", "none"),
    control_size=('Text("a").controlSize(.mini)', "font-size", "11px"),
)
def test_modifier_styles(key, code, prop, value):
    markup = previewtest.html(previewtest.preview(code))
    style = previewtest.style_of(markup)
    assert previewtest.effective(style, prop) == value


def test_filters_compose():
    root = previewtest.preview('Text("a").blur(radius: 2).grayscale(1).blur(radius: 1)')
    style = previewtest.style_of(previewtest.html(root))
    assert previewtest.effective(style, "filter") == "blur(2px) grayscale(1) blur(1px)"


def test_transforms_compose():
    root = previewtest.preview('Text("a").offset(x: 5, y: 0).scaleEffect(2)')
    style = previewtest.style_of(previewtest.html(root))
    assert previewtest.effective(style, "transform") == "translate(5px, 0px) scale(2)"


def test_stack_layout():
    root = previewtest.preview('HStack(alignment: .top, spacing: 4) {\n    Text("a")\n    Text("b")\n}')
    markup = previewtest.html(root)
    style = previewtest.style_of(markup)
    assert previewtest.effective(style, "flex-direction") == "row"
    assert previewtest.effective(style, "align-items") == "flex-start"
    assert previewtest.effective(style, "gap") == "4px"
    assert markup.index(">a<") < markup.index(">b<")


def test_foreach_expansion_count():
    root = previewtest.preview('VStack {\n    ForEach(2..<6) { i in\n        Text("Row \\(i)")\n    }\n}')
    markup = previewtest.html(root)
    rows = re.findall(r">Row (\d+)<", markup)
    assert rows == ["2", "3", "4", "5"]


def test_foreach_inclusive_and_items():
    loop = node("ForEach", forEachRange={"start": 1, "end": 3, "inclusive": True},
                variable="n", rowTemplate=node("Text", text="#\\(n)"))
    rows = crosspreview.expand_for_each(loop)
    assert [row.props["text"] for row in rows] == ["#1", "#2", "#3"]

    loop = node("ForEach", forEachItems=[{"a": 1}, "pear"], variable="item",
                rowTemplate=node("Text", text="\\(item.name)!"))
    rows = crosspreview.expand_for_each(loop)
    assert [row.props["text"] for row in rows] == ["{'a': 1}!", "pear!"]


def test_foreach_unresolved_rows():
    loop = node("ForEach", itemsSource="model.items", variable="item",
                rowTemplate=node("Text", text="\\(item)"))
    rows = crosspreview.expand_for_each(loop)
    assert [row.props["text"] for row in rows] == ["Item 1", "Item 2", "Item 3"]
    options = crosspreview.RenderOptions(unresolved_rows=1)
    assert len(crosspreview.expand_for_each(loop, options)) == 1


def test_foreach_without_template():
    loop = node("ForEach", forEachRange={"start": 0, "end": 4, "inclusive": False})
    assert crosspreview.expand_for_each(loop) == []
    markup = previewtest.html(loop)
    assert markup.startswith('<div class="sp-foreach"')
    assert markup.endswith("></div>")


def test_foreach_clone_isolation():
    template = node("VStack", node("Text", text="\\(i)"), modifiers=[
        crosspreview.Modifier("overlay", {"content": node("Circle")}, "node"),
    ])
    loop = node("ForEach", forEachRange={"start": 0, "end": 3, "inclusive": False},
                variable="i", rowTemplate=template)
    rows = crosspreview.expand_for_each(loop)
    assert len(rows) == 3

    rows[0].children[0].props["text"] = "changed"
    rows[0].modifiers[0].args["content"].kind = "Capsule"
    rows[0].props["extra"] = True

    assert rows[1].children[0].props["text"] == "1"
    assert rows[1].modifiers[0]["content"].kind == "Circle"
    assert "extra" not in rows[2].props
    assert template.children[0].props["text"] == "\\(i)"
    assert template.modifiers[0]["content"].kind == "Circle"


def test_clone_tree_is_deep():
    original = node("List", node("Text", text="a"), modifiers=[
        crosspreview.Modifier("padding", {"all": 1}, "mixed"),
    ], items=[1, [2]])
    copy = crosspreview.clone_tree(original)
    assert copy == original
    assert copy is not original
    assert copy.children[0] is not original.children[0]
    assert copy.modifiers[0] is not original.modifiers[0]
    assert copy.props["items"][1] is not original.props["items"][1]


def test_placeholder_rendering():
    root = previewtest.preview("MyCustomView()")
    markup = previewtest.html(root)
    assert "&lt;MyCustomView&gt;" in markup
    assert 'data-view="MyCustomView"' in markup


def test_unknown_kind_degrades():
    root = node("Custom", name="Widget")
    assert "&lt;Widget&gt;" in previewtest.html(root)
    assert crosspreview.render("not a node") == '<div class="sp-unknown">str</div>'


def test_broken_props_degrade():
    root = node("Slider", min="low", max=None)
    markup = previewtest.html(root)
    assert markup == '<div class="sp-unknown">Slider</div>'


def test_overlay_wrapper():
    root = previewtest.preview('Circle().overlay(Text("3"), alignment: .topTrailing)')
    markup = previewtest.html(root)
    assert 'class="sp-overlay"' in markup
    assert "pointer-events: none" in markup
    assert "justify-content: flex-end; align-items: flex-start" in markup
    assert markup.index("sp-circle") < markup.index("sp-overlay") < markup.index(">3<")


def test_background_view_layered():
    root = previewtest.preview('Text("a").background(Capsule().fill(.yellow))')
    markup = previewtest.html(root)
    assert 'class="sp-background"' in markup
    assert markup.index("sp-capsule") < markup.index(">a<")


def test_badge_and_accessibility():
    root = previewtest.preview(
        'Image(systemName: "bell").badge(5).accessibilityLabel("Alerts").help("Open")'
    )
    markup = previewtest.html(root)
    assert '<span class="sp-badge">5</span>' in markup
    assert 'aria-label="Alerts"' in markup
    assert 'title="Open"' in markup
    assert "\U0001F514" in markup


def test_navigation_title_and_toolbar():
    root = previewtest.preview(
        'NavigationStack {\n'
        '    List {\n'
        '        Text("a")\n'
        '    }\n'
        '    .navigationTitle("Inbox")\n'
        '    .navigationBarTitleDisplayMode(.inline)\n'
        '    .toolbar {\n'
        '        Text("Edit")\n'
        '    }\n'
        '    .searchable(text: $q, prompt: "Find mail")\n'
        '}'
    )
    markup = previewtest.html(root)
    assert '<h1 class="sp-nav-title-inline">Inbox</h1>' in markup
    assert 'class="sp-toolbar"' in markup
    assert 'placeholder="Find mail"' in markup
    assert markup.index("sp-navbar") < markup.index("sp-nav-content")


def test_tab_bar():
    root = previewtest.preview(
        'TabView {\n'
        '    Text("Home").tabItem { Label("Home", systemImage: "house") }\n'
        '    Text("Settings").tabItem { Label("Settings", systemImage: "gear") }\n'
        '}'
    )
    markup = previewtest.html(root)
    tabs = re.findall(r'class="sp-tab(?: sp-tab-selected)?" role="tab">(.*?)</div>', markup)
    assert len(tabs) == 2
    assert "Settings" in tabs[1]
    assert "sp-tab-selected" in markup
    assert "⚙" in tabs[1]


def test_list_rows_and_sections():
    root = previewtest.preview(
        'List {\n'
        '    Section(header: Text("First"), footer: Text("End")) {\n'
        '        Text("a")\n'
        '    }\n'
        '    Text("b")\n'
        '}\n'
        '.listStyle(.plain)'
    )
    markup = previewtest.html(root)
    assert "sp-list-plain" in markup
    assert '<div class="sp-section-header">First</div>' in markup
    assert '<div class="sp-section-footer">End</div>' in markup
    assert markup.count('class="sp-row"') == 2


def test_controls():
    markup = previewtest.html(previewtest.preview(
        'Form {\n'
        '    Toggle("Wifi", isOn: $wifi)\n'
        '    Slider(value: $v, in: 0...10)\n'
        '    SecureField("Password", text: $pw)\n'
        '    Picker("Size", selection: $s) {\n'
        '        Text("Small")\n'
        '        Text("Large")\n'
        '    }\n'
        '    ProgressView(value: 0.3)\n'
        '}'
    ))
    assert 'role="switch"' in markup
    assert 'type="range" min="0" max="10" value="5.0" disabled' in markup
    assert 'type="password"' in markup
    assert "<option>Small</option><option>Large</option>" in markup
    assert '<progress value="0.3" max="1"></progress>' in markup


@previewtest.params(
    "code modifier cls",
    list=('List {\n    Text("a")\n}', "listStyle", "sp-list sp-list-insetGrouped"),
    button=('Button("a") { }', "buttonStyle", "sp-button sp-button-automatic"),
    field=('TextField("a", text: $a)', "textFieldStyle", "sp-textfield sp-textfield-automatic"),
)
def test_style_modifier_without_value(key, code, modifier, cls):
    root = previewtest.preview(f"{code}.{modifier}()")
    assert root.modifiers[0].args == {}
    markup = previewtest.html(root)
    assert f'class="{cls}"' in markup
    assert "None" not in markup
    root.modifiers[0] = crosspreview.Modifier(modifier, {}, "enum")
    assert f'class="{cls}"' in previewtest.html(root)


def test_segmented_picker():
    markup = previewtest.html(previewtest.preview(
        'Picker("Mode", selection: $m) {\n    Text("A")\n    Text("B")\n}\n.pickerStyle(.segmented)'
    ))
    assert 'sp-segment sp-segment-selected">A</span>' in markup
    assert "<select" not in markup


@previewtest.params(
    "url href",
    https=("https://example.com", "https://example.com"),
    mail=("mailto:a@b.c", "mailto:a@b.c"),
    script=("javascript:alert(1)", "#"),
)
def test_link_sanitized(key, url, href):
    markup = previewtest.html(node("Link", title="go", url=url))
    assert f'href="{href}"' in markup


def test_async_image_https_only():
    assert 'src="https://a.b/c.png"' in previewtest.html(node("AsyncImage", url="https://a.b/c.png"))
    assert "src=" not in previewtest.html(node("AsyncImage", url="data:text/html,x"))


def test_grid_columns():
    markup = previewtest.html(previewtest.preview(
        'Grid {\n'
        '    GridRow {\n        Text("a")\n        Text("b")\n        Text("c")\n    }\n'
        '    Divider()\n'
        '}'
    ))
    assert "grid-template-columns: repeat(3, auto)" in markup
    assert "grid-column: 1 / -1" in markup


def test_disclosure_and_menu():
    markup = previewtest.html(previewtest.preview(
        'VStack {\n'
        '    DisclosureGroup("More") {\n        Text("hidden")\n    }\n'
        '    Menu("Actions") {\n        Text("Copy")\n    }\n'
        '}'
    ))
    assert "<summary>More</summary>" in markup
    assert " open>" in markup
    assert 'class="sp-menu-label">Actions ▾</summary>' in markup


def test_error_banner():
    assert crosspreview.render_error_banner([]) == ""
    banner = crosspreview.render_error_banner(["bad <thing>", "other"])
    assert banner.startswith('<div class="sp-errors" role="alert">')
    assert "2 problems" in banner
    assert "<li>bad &lt;thing&gt;</li><li>other</li>" in banner
    assert "1 problem<" in crosspreview.render_error_banner(["x"])
