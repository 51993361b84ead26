from storyboard import models


class PromptBuilder:

    @staticmethod
    def build_scene_prompt(scene: models.Scene) -> str:
        """
        The generated image_prompt wins. Scenes without one (hand-edited or
        from a sparse script) get a prompt assembled from their narrative fields.
        """
        if scene.image_prompt and scene.image_prompt.strip():
            return scene.image_prompt.strip()

        parts = []
        if scene.title:
            parts.append(f"Scene: {scene.title}.")
        if scene.location:
            parts.append(f"Location: {scene.location}.")
        if scene.description:
            parts.append(scene.description.strip())
        if scene.action:
            parts.append(f"Action: {scene.action.strip()}")
        if scene.mood:
            parts.append(f"Mood: {scene.mood}.")

        if not parts:
            return ""

        return f"A cinematic storyboard frame. {' '.join(parts)}"
