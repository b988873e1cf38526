#!/usr/bin/env python3
"""
track_head_pose.py - Offline neck rotation tracking

Runs face landmark detection on a video (or replays a landmark recording),
estimates the neck joint pitch/yaw for every frame and writes the angles to
a JSON file that can be replayed onto an avatar.

Usage:
    python track_head_pose.py [options]

Example:
    python track_head_pose.py --input input.mp4 --output angles.json
    python track_head_pose.py --input input.mp4 --save-landmarks landmarks.json
    python track_head_pose.py --input landmarks.json --output angles.json --smoothing 0.3
"""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import Iterator, Optional
import torch
from tqdm import tqdm

# Import our package
sys.path.append(str(Path(__file__).parent.parent))
from neck_tracker import (
    BoneRotationDriver,
    ConfigError,
    DataExporter,
    DataLoader,
    EstimatorConfig,
    HeadPoseEstimator,
    InputType,
    JsonExportDriver,
    NeckTracker,
    detect_input_type,
)
from neck_tracker.core.base_joint_driver import BaseJointDriver
from neck_tracker.processors.video_reader import VideoReader


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Estimate avatar neck rotation from face video or landmarks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input Types:
  The script detects the input type from the extension:
  - Video files (.mp4, .avi, etc.) → detection + estimation
  - Landmarks file (.json)         → skip detection, estimation only

Examples:
  # Full pipeline
  python track_head_pose.py --input input.mp4 --output angles.json

  # Keep detections for later experiments with the tuning values
  python track_head_pose.py --input input.mp4 --save-landmarks landmarks.json
  python track_head_pose.py --input landmarks.json --output angles.json --amplification 1.5
        """
    )

    parser.add_argument("--input", "-i", type=str, required=True,
                        help="Input file (video or landmarks)")
    parser.add_argument("--output", "-o", type=str,
                        help="Output pose angles JSON file")
    parser.add_argument("--save-landmarks", type=str,
                        help="Save detected landmarks to a JSON file")
    parser.add_argument("--model-path", type=str,
                        help="MediaPipe face_landmarker.task file (downloaded if missing)")

    # Estimator tuning
    parser.add_argument("--amplification", type=float,
                        help="Pitch amplification factor (default 1.2)")
    parser.add_argument("--pitch-range", type=float,
                        help="Pitch limit in degrees (default 45)")
    parser.add_argument("--yaw-range", type=float,
                        help="Yaw limit in degrees (default 60)")
    parser.add_argument("--smoothing", "-s", type=float,
                        help="Fraction moved toward the new angle per frame (default 0.15)")

    parser.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    parser.add_argument("--debug", action="store_true", help="Show debug information")

    return parser.parse_args()


def build_config(args: argparse.Namespace) -> EstimatorConfig:
    """Map CLI flags onto an EstimatorConfig, keeping defaults for unset flags."""
    return EstimatorConfig.from_dict({
        "amplification": args.amplification,
        "pitch_range": math.radians(args.pitch_range) if args.pitch_range is not None else None,
        "yaw_range": math.radians(args.yaw_range) if args.yaw_range is not None else None,
        "smoothing": args.smoothing,
    })


def main() -> None:
    """Main execution function."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
        input_type = detect_input_type(args.input)
        print(f"Detected input type: {input_type}")
        process(args, input_type, config, show_progress=not args.no_progress)
    except (ConfigError, ValueError, FileNotFoundError, RuntimeError) as e:
        print(f"Error: {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    print("Tracking completed successfully!")


def process(args: argparse.Namespace, input_type: InputType, config: EstimatorConfig, show_progress: bool) -> None:
    """Run detection (if needed) and estimation over the whole input."""
    reader: Optional[VideoReader] = None
    detector = None

    if input_type == InputType.VIDEO:
        from neck_tracker.detectors import MediaPipeDetector

        reader = VideoReader(args.input)
        detector = MediaPipeDetector(model_path=args.model_path, fps=reader.fps)
        metadata = {
            'fps': reader.fps,
            'width': reader.width,
            'height': reader.height,
            'frame_count': reader.frame_count,
        }

        def input_stream() -> Iterator[Optional[torch.Tensor]]:
            for frame in reader.read_frames():
                yield detector.detect(frame)
    else:
        landmarks_iterator, metadata = DataLoader.load_landmarks(args.input)

        def input_stream() -> Iterator[Optional[torch.Tensor]]:
            yield from landmarks_iterator

    print(f"  Input: {metadata.get('width', '?')}x{metadata.get('height', '?')}, "
          f"{metadata['fps']} fps, {metadata['frame_count']} frames")

    driver: BaseJointDriver
    if args.output:
        driver = JsonExportDriver(args.output, fps=metadata['fps'], extra_metadata=config.to_dict())
        print(f"Writing angles to: {args.output}")
    else:
        driver = BoneRotationDriver()

    landmarks_writer: Optional[DataExporter] = None
    if args.save_landmarks:
        landmarks_writer = DataExporter(args.save_landmarks, {
            'fps': metadata['fps'],
            'width': metadata.get('width'),
            'height': metadata.get('height'),
        })
        landmarks_writer.open()
        print(f"Writing landmarks to: {args.save_landmarks}")

    tracker = NeckTracker(estimator=HeadPoseEstimator(config), driver=driver)

    progress_bar = None
    if show_progress:
        progress_bar = tqdm(total=metadata['frame_count'], desc="Tracking", unit="frames")

    tracked = 0
    try:
        for landmarks in input_stream():
            if landmarks_writer is not None:
                landmarks_writer.write_item(landmarks.cpu().tolist() if landmarks is not None else None)

            frame = tracker.update(landmarks)
            tracked += int(frame.tracking)

            if progress_bar is not None:
                pitch, yaw = frame.angles.to_tuple()
                progress_bar.set_postfix(pitch=f"{math.degrees(pitch):+.1f}", yaw=f"{math.degrees(yaw):+.1f}")
                progress_bar.update(1)
    finally:
        if reader is not None:
            reader.close()
        if detector is not None:
            detector.close()
        driver.close()
        if landmarks_writer is not None:
            landmarks_writer.close()
            print("Landmarks saved")
        if progress_bar is not None:
            progress_bar.close()

    print(f"Processing complete: {tracker.frame_idx} frames, {tracked} tracked, {tracker.rejected_frames} rejected")


if __name__ == "__main__":
    main()
