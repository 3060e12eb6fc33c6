"""Example pipeline: build a small HUD, snap a drag and export ParseUI code."""

from uibuilder import ElementTree, UIAnchor, absolute_rect, build_export_artifacts, local_from_absolute, snap_node


def main() -> None:
    tree = ElementTree()
    panel = tree.add("Container", "Score Panel")
    tree.update(panel.id, anchor=UIAnchor.TopCenter, size=[360, 80], position=[0, 24])
    label = tree.add("Text", "scoreLabel", parent_id=panel.id)
    tree.update(label.id, text_label="Score: 0", anchor=UIAnchor.Center, size=[200, 40])
    badge = tree.add("Image", "badge")
    tree.update(badge.id, size=[64, 64], image_type=1)

    # drop the badge a few pixels right of the panel; it lands on the panel's edge
    panel_rect = absolute_rect(panel, tree)
    snapped = snap_node(tree, badge.id, (panel_rect.right + 5, panel_rect.top + 3))
    tree.update(badge.id, position=list(local_from_absolute(snapped.x, snapped.y, badge, tree)))
    print("Snapped badge to:", (snapped.x, snapped.y), "guides:", snapped.vertical_guide, snapped.horizontal_guide)

    artifacts = build_export_artifacts(tree.snapshot())
    print(artifacts.typescript_code)
    print("Strings:", artifacts.strings_json)


if __name__ == "__main__":
    main()
