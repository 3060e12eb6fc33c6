"""Example pipeline: import hand-edited ParseUI source into an element tree."""

from uibuilder import ElementTree, compute_all_bounds

TEXT = """
// edited by hand after export
export const menu = modlib.ParseUI(
  {
    name: "Main Menu",
    type: "Container",
    anchor: mod.UIAnchor.Center,
    size: [400, 300],
    children: [
      { name: "title", type: "Text", textLabel: mod.stringkeys.title, anchor: mod.UIAnchor.TopCenter },
      /* the button keeps its default colors */
      { name: "play", type: "Button", buttonEnabled: true, anchor: mod.UIAnchor.BottomCenter, position: [0, -16] }
    ]
  }
);
"""

STRINGS = {"title": "Welcome back"}


def main() -> None:
    tree = ElementTree()
    result = tree.import_source(TEXT, strings=STRINGS)
    if not result.success:
        print("Import failed:", result.error)
        return
    print("Imported roots:", result.imported_count)
    for entry in compute_all_bounds(tree):
        node = tree.get(entry.id)
        rect = entry.rect
        print(f"{node.name:10s} {node.type.value:9s} at ({rect.left:g}, {rect.top:g}) size {rect.width:g}x{rect.height:g}")


if __name__ == "__main__":
    main()
