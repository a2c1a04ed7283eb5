"""Prompt templates for the ComfyUI FLUX workflows."""

from ..models import Angle, Pose

POSE_PHRASES = {
    Pose.STANDING: "standing upright in a relaxed, natural stance",
    Pose.SITTING: "sitting on a simple stool with a straight back",
    Pose.WALKING: "walking forward mid-stride",
    Pose.RUNNING: "running with a dynamic, energetic stride",
    Pose.FASHION_POSE: "striking a confident editorial fashion pose",
}

ANGLE_PHRASES = {
    Angle.FRONT: "seen straight from the front, facing the camera",
    Angle.SIDE: "seen in full side profile",
    Angle.BACK: "seen from directly behind, showing the back of the outfit",
    Angle.THREE_QUARTER: "seen from a 45-degree three-quarter angle",
}

CLOTHING_PROMPT_SUFFIX = (
    "Product photograph of the clothing item alone, laid flat or on an invisible "
    "mannequin, centered on a plain light-grey studio background, soft even "
    "lighting, sharp fabric detail. No person, no text, no logos, no watermarks."
)


def build_tryon_prompt(pose: Pose, angle: Angle, person_description: str = "person") -> str:
    """Build the FLUX reference prompt for one pose/angle combination.

    Reference image 1 is the model photo, reference image 2 the clothing.
    """
    return (
        f"Keep the exact same {person_description} from reference image 1: "
        f"preserve their face, hair, skin tone and body shape exactly. "
        f"Dress them in the clothing shown in reference image 2, reproducing its "
        f"color, pattern, fabric and cut faithfully. "
        f"Show the {person_description} {POSE_PHRASES[pose]}, {ANGLE_PHRASES[angle]}. "
        f"Full-body fashion photograph, clean studio background, natural lighting. "
        f"The {person_description} should look identical except for the new clothing, pose and camera angle."
    )


def build_clothing_prompt(description: str) -> str:
    """Build the text-to-image prompt for a clothing description."""
    description = " ".join(description.split())
    if not description.endswith("."):
        description += "."
    return f"{description} {CLOTHING_PROMPT_SUFFIX}"
