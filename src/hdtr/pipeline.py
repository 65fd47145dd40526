from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Any, Callable

import yaml

from .errors import (
    InputFileDoesNotExist,
    InvalidPipeline,
    NoInputFilesSpecified,
    NoSaveOperationSpecified,
)
from .images import ImageSet
from .masks.generate import MaskType, VerticalLogistic, mask_type_to_data, parse_mask_type
from .utils.config import dump_config, load_config

ProgressCallback = Callable[[dict], None]

EXAMPLE_IMAGES = ["image01.png", "image02.png", "image03.png", "image04.png"]


@dataclass
class PipelineInput:
    image: str
    mask: str | None = None

    @classmethod
    def from_data(cls, data: Any) -> "PipelineInput":
        if isinstance(data, str):
            return cls(image=data)
        if isinstance(data, dict) and isinstance(data.get("image"), str):
            mask = data.get("mask")
            if mask is not None and not isinstance(mask, str):
                raise InvalidPipeline(f"mask for {data['image']} must be a path")
            return cls(image=data["image"], mask=mask)
        raise InvalidPipeline(f"filenames entries need an 'image' path, got {data!r}")

    def to_data(self) -> dict:
        return {"image": self.image, "mask": self.mask}


def _flag(data: dict, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidPipeline(f"'{key}' must be true or false, got {value!r}")
    return value


@dataclass
class Pipeline:
    filenames: list[PipelineInput]
    save: str
    generate_masks: MaskType | None = None
    normalize_masks: bool = False
    save_masks: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "Pipeline":
        if not isinstance(data, dict):
            raise InvalidPipeline("pipeline must be a mapping")
        if "filenames" not in data or not isinstance(data["filenames"], list):
            raise InvalidPipeline("'filenames' must be a list")
        if not data.get("save"):
            raise NoSaveOperationSpecified()

        mask_type = None
        if data.get("generate_masks") is not None:
            try:
                mask_type = parse_mask_type(data["generate_masks"])
            except ValueError as err:
                raise InvalidPipeline(str(err)) from err

        return cls(
            filenames=[PipelineInput.from_data(entry) for entry in data["filenames"]],
            save=str(data["save"]),
            generate_masks=mask_type,
            normalize_masks=_flag(data, "normalize_masks"),
            save_masks=_flag(data, "save_masks"),
        )

    def to_dict(self) -> dict:
        return {
            "filenames": [entry.to_data() for entry in self.filenames],
            "generate_masks": mask_type_to_data(self.generate_masks) if self.generate_masks is not None else None,
            "normalize_masks": self.normalize_masks,
            "save_masks": self.save_masks,
            "save": self.save,
        }

    def validate(self) -> None:
        """Check the inputs exist. Dimensions are only known once images are decoded."""
        if not self.filenames:
            raise NoInputFilesSpecified()
        for entry in self.filenames:
            if not Path(entry.image).exists():
                raise InputFileDoesNotExist(entry.image)
            if entry.mask is not None and not Path(entry.mask).exists():
                raise InputFileDoesNotExist(entry.mask)

    def execute(self, workers: int | None = None, progress_callback: ProgressCallback | None = None) -> Path:
        self.validate()

        def _emit(event: str, started: float, **details) -> None:
            if progress_callback:
                progress_callback({"event": event, "elapsed_s": perf_counter() - started, **details})

        started = perf_counter()
        images = ImageSet.from_paths(
            [entry.image for entry in self.filenames],
            [entry.mask for entry in self.filenames],
            workers=workers,
        )
        _emit("images_loaded", started, count=len(images), width=images.width, height=images.height)

        if self.generate_masks is not None:
            started = perf_counter()
            images.generate_masks(self.generate_masks)
            _emit("masks_generated", started, count=len(images.masks), mask_type=mask_type_to_data(self.generate_masks))

        if self.normalize_masks:
            started = perf_counter()
            images.normalize_masks()
            _emit("masks_normalized", started)

        if self.save_masks:
            started = perf_counter()
            paths = images.save_masks()
            _emit("masks_saved", started, outputs=[str(p) for p in paths])

        started = perf_counter()
        output = images.save(self.save, workers=workers)
        _emit("output_saved", started, output=str(output))
        return output


def load_pipeline(path: str | Path) -> Pipeline:
    try:
        data = load_config(path)
    except (ValueError, yaml.YAMLError) as err:
        raise InvalidPipeline(f"{path}: {err}") from err
    return Pipeline.from_dict(data)


def example_pipeline(images: list[str] | None = None) -> Pipeline:
    return Pipeline(
        filenames=[PipelineInput(image=p) for p in (images or EXAMPLE_IMAGES)],
        save="blended.png",
        generate_masks=VerticalLogistic(k=0.01),
        normalize_masks=True,
        save_masks=False,
    )


def save_example(destination: str | Path, images: list[str] | None = None) -> Path:
    dump_config(destination, example_pipeline(images).to_dict())
    return Path(destination)
