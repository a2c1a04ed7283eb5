"""ComfyUI API client for FLUX 2 Klein clothing and try-on generation."""

import asyncio
import logging
import random
import time
import uuid
from typing import Any

import httpx

from ..config import ComfyUIConfig, GenerationConfig
from .images import sniff_mime_type

logger = logging.getLogger(__name__)


class ComfyUIClient:
    """Client for ComfyUI's HTTP API.

    Images are pushed through ``/upload/image`` so the server does not
    need to share a filesystem with this process.
    """

    def __init__(
        self,
        config: ComfyUIConfig,
        generation: GenerationConfig | None = None,
        timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.generation = generation or GenerationConfig()
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def check_connection(self) -> bool:
        """Verify ComfyUI is running and accessible."""
        try:
            response = await self.client.get(f"{self.config.base_url}/system_stats")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def upload_image(self, data: bytes, name: str | None = None) -> str:
        """Upload image bytes to ComfyUI's input folder.

        Returns the name to reference from a LoadImage node.
        """
        mime_type = sniff_mime_type(data)
        if name is None:
            name = f"stylemorph_{uuid.uuid4().hex[:8]}.{mime_type.split('/')[1]}"

        response = await self.client.post(
            f"{self.config.base_url}/upload/image",
            files={"image": (name, data, mime_type)},
            data={"overwrite": "true"},
        )
        response.raise_for_status()

        result = response.json()
        if result.get("subfolder"):
            return f"{result['subfolder']}/{result['name']}"
        return result["name"]

    async def generate_tryon(
        self,
        model_image: bytes,
        clothing_image: bytes,
        prompt: str,
    ) -> bytes:
        """Dress the person in ``model_image`` with ``clothing_image``.

        Returns the PNG bytes of the first output image.
        """
        model_name = await self.upload_image(model_image)
        clothing_name = await self.upload_image(clothing_image)

        workflow = self._build_tryon_workflow(
            model_filename=model_name,
            clothing_filename=clothing_name,
            prompt=prompt,
            seed=self._seed(),
        )
        return await self._run_workflow(workflow)

    async def generate_from_text(self, prompt: str) -> bytes:
        """Render a clothing image from a text prompt."""
        workflow = self._build_text_to_image_workflow(prompt=prompt, seed=self._seed())
        return await self._run_workflow(workflow)

    async def _run_workflow(self, workflow: dict[str, Any]) -> bytes:
        prompt_id = await self._queue_prompt(workflow)
        logger.debug("Queued ComfyUI prompt %s", prompt_id)

        output_images = await self._wait_for_completion(prompt_id, timeout=self.timeout)
        if not output_images:
            raise RuntimeError("No images generated")

        return await self._get_image(output_images[0])

    def _base_nodes(self, prompt: str, seed: int) -> dict[str, Any]:
        """Loaders, text encoding and sampler nodes shared by both workflows."""
        return {
            "110": {
                "class_type": "UNETLoader",
                "inputs": {
                    "unet_name": "flux-2-klein-9b-fp8.safetensors",
                    "weight_dtype": "default",
                },
            },
            "111": {
                "class_type": "CLIPLoader",
                "inputs": {
                    "clip_name": "qwen_3_8b_fp8mixed.safetensors",
                    "type": "flux2",
                    "device": "default",
                },
            },
            "113": {
                "class_type": "VAELoader",
                "inputs": {"vae_name": "flux2-vae.safetensors"},
            },
            "112": {
                "class_type": "CLIPTextEncode",
                "inputs": {"clip": ["111", 0], "text": prompt},
            },
            # Zero out conditioning for negative
            "118": {
                "class_type": "ConditioningZeroOut",
                "inputs": {"conditioning": ["112", 0]},
            },
            "109": {
                "class_type": "RandomNoise",
                "inputs": {"noise_seed": seed},
            },
            "104": {
                "class_type": "KSamplerSelect",
                "inputs": {"sampler_name": "euler"},
            },
            "107": {
                "class_type": "SamplerCustomAdvanced",
                "inputs": {
                    "noise": ["109", 0],
                    "guider": ["106", 0],
                    "sampler": ["104", 0],
                    "sigmas": ["105", 0],
                    "latent_image": ["119", 0],
                },
            },
            "108": {
                "class_type": "VAEDecode",
                "inputs": {"samples": ["107", 0], "vae": ["113", 0]},
            },
            "save": {
                "class_type": "SaveImage",
                "inputs": {"images": ["108", 0], "filename_prefix": "stylemorph"},
            },
        }

    def _build_text_to_image_workflow(self, prompt: str, seed: int) -> dict[str, Any]:
        """FLUX 2 Klein text-to-image at the configured canvas size."""
        gen = self.generation
        workflow = self._base_nodes(prompt, seed)
        workflow.update({
            "119": {
                "class_type": "EmptyFlux2LatentImage",
                "inputs": {"width": gen.width, "height": gen.height, "batch_size": 1},
            },
            "105": {
                "class_type": "Flux2Scheduler",
                "inputs": {"steps": gen.steps, "width": gen.width, "height": gen.height},
            },
            "106": {
                "class_type": "CFGGuider",
                "inputs": {
                    "model": ["110", 0],
                    "positive": ["112", 0],
                    "negative": ["118", 0],
                    "cfg": gen.cfg,
                },
            },
        })
        return workflow

    def _build_tryon_workflow(
        self,
        model_filename: str,
        clothing_filename: str,
        prompt: str,
        seed: int,
    ) -> dict[str, Any]:
        """FLUX 2 Klein workflow conditioned on two reference images.

        - Reference image 1 (node 76): model/person photo
        - Reference image 2 (node 81): clothing to wear

        Output size follows the scaled person image.
        """
        gen = self.generation
        workflow = self._base_nodes(prompt, seed)
        workflow.update({
            "76": {
                "class_type": "LoadImage",
                "inputs": {"image": model_filename},
            },
            "81": {
                "class_type": "LoadImage",
                "inputs": {"image": clothing_filename},
            },
            "114": {
                "class_type": "ImageScaleToTotalPixels",
                "inputs": {
                    "image": ["76", 0],
                    "upscale_method": "nearest-exact",
                    "megapixels": 1.0,
                    "resolution_steps": 1,
                },
            },
            "115": {
                "class_type": "ImageScaleToTotalPixels",
                "inputs": {
                    "image": ["81", 0],
                    "upscale_method": "nearest-exact",
                    "megapixels": 1.0,
                    "resolution_steps": 1,
                },
            },
            "120": {
                "class_type": "GetImageSize",
                "inputs": {"image": ["114", 0]},
            },
            "vae_encode_person": {
                "class_type": "VAEEncode",
                "inputs": {"pixels": ["114", 0], "vae": ["113", 0]},
            },
            "vae_encode_clothing": {
                "class_type": "VAEEncode",
                "inputs": {"pixels": ["115", 0], "vae": ["113", 0]},
            },
            "ref_positive_person": {
                "class_type": "ReferenceLatent",
                "inputs": {"conditioning": ["112", 0], "latent": ["vae_encode_person", 0]},
            },
            "ref_negative_person": {
                "class_type": "ReferenceLatent",
                "inputs": {"conditioning": ["118", 0], "latent": ["vae_encode_person", 0]},
            },
            # Clothing references chain after the person references
            "ref_positive_clothing": {
                "class_type": "ReferenceLatent",
                "inputs": {
                    "conditioning": ["ref_positive_person", 0],
                    "latent": ["vae_encode_clothing", 0],
                },
            },
            "ref_negative_clothing": {
                "class_type": "ReferenceLatent",
                "inputs": {
                    "conditioning": ["ref_negative_person", 0],
                    "latent": ["vae_encode_clothing", 0],
                },
            },
            "119": {
                "class_type": "EmptyFlux2LatentImage",
                "inputs": {"width": ["120", 0], "height": ["120", 1], "batch_size": 1},
            },
            "105": {
                "class_type": "Flux2Scheduler",
                "inputs": {"steps": gen.steps, "width": ["120", 0], "height": ["120", 1]},
            },
            "106": {
                "class_type": "CFGGuider",
                "inputs": {
                    "model": ["110", 0],
                    "positive": ["ref_positive_clothing", 0],
                    "negative": ["ref_negative_clothing", 0],
                    "cfg": gen.cfg,
                },
            },
        })
        return workflow

    async def _queue_prompt(self, workflow: dict[str, Any]) -> str:
        """Queue a prompt and return the prompt ID."""
        payload = {
            "prompt": workflow,
            "client_id": str(uuid.uuid4()),
        }

        response = await self.client.post(
            f"{self.config.base_url}/prompt",
            json=payload,
        )

        if response.status_code != 200:
            raise RuntimeError(f"ComfyUI rejected workflow: {response.text[:500]}")

        return response.json()["prompt_id"]

    async def _wait_for_completion(
        self,
        prompt_id: str,
        poll_interval: float = 0.5,
        timeout: float = 300.0,
    ) -> list[dict[str, Any]]:
        """Poll until the prompt completes, return output image info."""
        deadline = time.monotonic() + timeout

        while time.monotonic() < deadline:
            response = await self.client.get(f"{self.config.base_url}/history/{prompt_id}")

            if response.status_code == 200:
                history = response.json()
                if prompt_id in history:
                    outputs = history[prompt_id].get("outputs", {})
                    for node_output in outputs.values():
                        if "images" in node_output:
                            return node_output["images"]

            await asyncio.sleep(poll_interval)

        raise TimeoutError(f"Generation timed out after {timeout}s")

    async def _get_image(self, image_info: dict[str, Any]) -> bytes:
        """Retrieve a generated image from ComfyUI."""
        params = {
            "filename": image_info["filename"],
            "subfolder": image_info.get("subfolder", ""),
            "type": image_info.get("type", "output"),
        }

        response = await self.client.get(
            f"{self.config.base_url}/view",
            params=params,
        )
        response.raise_for_status()

        return response.content

    def _seed(self) -> int:
        if self.generation.seed is not None:
            return self.generation.seed
        return random.randint(0, 2**32 - 1)

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
